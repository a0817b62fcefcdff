# -*- coding: utf-8 -*-
"""
A command line wrapper to train a linear CRF on an encoded corpus.

"""

import argparse
import logging
import multiprocessing

from linearcrf import train

if __name__ == '__main__':

    parser = argparse.ArgumentParser()
    parser.add_argument("datafile", help="encoded data file for training input")
    parser.add_argument("-p", "--prior", default="QUADRATIC",
                        help="prior: NONE, QUADRATIC, HUBER, QUARTIC or DROPOUT.")
    parser.add_argument("-s", "--sigma", type=float,
                        default=1.0,
                        help="sigma")
    parser.add_argument("-d", "--delta", type=float,
                        default=0.5,
                        help="dropout probability of every feature (DROPOUT prior).")
    parser.add_argument("--dropout-scale", type=float, default=1.0,
                        help="weight of the dropout penalty.")
    parser.add_argument("--dropout-approx", action="store_true",
                        help="approximate the dropout gradient with per position expectations.")
    parser.add_argument("-u", "--unsup-scale", type=float, default=0.0,
                        help="weight of the dropout penalty of unlabeled documents.")
    parser.add_argument("-t", "--threads", type=int,
                        default=1,
                        help="number of worker threads; 0: one per core.")
    parser.add_argument("-b", "--background", default="O",
                        help="background label.")
    parser.add_argument("--no-condense", action="store_true",
                        help="don't condense singleton features.")
    parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(name)s %(message)s")
    threads = args.threads if args.threads > 0 else multiprocessing.cpu_count()

    train.train(args.datafile, background=args.background,
                prior=args.prior, sigma=args.sigma, delta=args.delta,
                dropoutScale=args.dropout_scale, dropoutApprox=args.dropout_approx,
                unsupDropoutScale=args.unsup_scale, numThreads=threads,
                condense=not args.no_condense)
