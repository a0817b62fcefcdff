# -*- coding: utf-8 -*-
"""
Fans per document work out to a pool of worker threads and hands the
results back as they complete.

Tasks share the (read-only) weight view and own everything else they touch,
so the only synchronisation is the pool's result queue.  At most maxPending
tasks are in flight; submitting blocks until a slot frees up.

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

import logging
import queue
import threading
from multiprocessing.pool import ThreadPool

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class _Failure(object):
    __slots__ = ('error',)

    def __init__(self, error):
        self.error = error


class DocumentScheduler(object):

    def __init__(self, numThreads=1, maxPending=None):
        if numThreads < 1:
            raise ValueError("numThreads must be positive, got %r" % (numThreads,))
        self.numThreads = numThreads
        self.maxPending = maxPending if maxPending is not None else 2 * numThreads

    def run(self, process, tasks):
        '''yields process(task) for every task, in completion order'''
        if self.numThreads == 1:
            for task in tasks:
                yield process(task)
            return

        results = queue.Queue()
        slots = threading.BoundedSemaphore(self.maxPending)

        def done(result):
            results.put(result)
            slots.release()

        def failed(error):
            results.put(_Failure(error))
            slots.release()

        def drain(block, count):
            while count > 0:
                try:
                    result = results.get(block)
                except queue.Empty:
                    return
                count -= 1
                if isinstance(result, _Failure):
                    raise result.error
                yield result

        pool = ThreadPool(self.numThreads)
        submitted = 0; collected = 0
        try:
            for task in tasks:
                slots.acquire()
                pool.apply_async(process, (task,), callback=done, error_callback=failed)
                submitted += 1
                for result in drain(False, submitted - collected):
                    collected += 1
                    yield result
            pool.close()
            pool.join()
            for result in drain(True, submitted - collected):
                collected += 1
                yield result
        finally:
            pool.terminate()
        logger.debug("scheduler: %d tasks on %d threads", submitted, self.numThreads)


def mergeSparse(into, sparse, scale=1.0):
    '''into[f] += scale * sparse[f] for every feature in the sparse table'''
    if sparse is None:
        return into
    for f, source in sparse.items():
        if scale == 1.0:
            into[f] += source
        else:
            into[f] += scale * source
    return into
