# -*- coding: utf-8 -*-
"""
A command line wrapper to check the objective's derivative against finite
differences.

"""

import argparse
import logging

from linearcrf import train

if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument("datafile", help="encoded data file")
    parser.add_argument("-p", "--prior", default="QUADRATIC",
                        help="prior: NONE, QUADRATIC, HUBER, QUARTIC or DROPOUT.")
    parser.add_argument("-s", "--sigma", type=float, default=1.0,
                        help="sigma")
    parser.add_argument("-d", "--delta", type=float, default=0.5,
                        help="dropout probability of every feature (DROPOUT prior).")
    parser.add_argument("--step", type=float, default=0.0001,
                        help="finite difference step.")
    parser.add_argument("-n", "--nparams", type=int, default=None,
                        help="only check the first n parameters.")
    parser.add_argument("-b", "--background", default="O",
                        help="background label.")
    args = parser.parse_args()
    logging.basicConfig(level=logging.WARNING)

    train.checkCrfDev(args.datafile, background=args.background, nparams=args.nparams, step=args.step,
                      prior=args.prior, sigma=args.sigma, delta=args.delta)
