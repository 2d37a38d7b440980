"""
Parallel field evaluation.

FieldEvaluator is the fork-join boundary between the frame loop and the
escape-time kernels: it takes an immutable FrameParams snapshot and
returns escape scores, either for the whole viewport or for a list of
pixel coordinates. Every backend joins all of its work before returning,
so callers can colorize straight away.

Backends:
- 'threads': row chunks on a ThreadPoolExecutor, each chunk running a
  GIL-free Numba kernel (default)
- 'numba': one prange kernel using Numba's own threading layer
- 'gpu': PyTorch tensors (see compute_gpu.py), when available
"""

import os
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .compute import compute_julia, compute_julia_rows, compute_julia_points
from .compute_gpu import TORCH_AVAILABLE, get_gpu_compute, should_default_to_gpu


class FieldEvaluator:
    """
    Computes escape scores for a frame using a worker pool.

    Usage:
        with FieldEvaluator(workers=8) as evaluator:
            scores = evaluator.evaluate(state.frame_params(800, 600))

    Attributes:
        backend: The backend actually in use ('threads', 'numba' or 'gpu')
        workers: Number of worker threads for the 'threads' backend
        chunk_rows: Rows per submitted task
    """

    def __init__(self, workers=None, chunk_rows=16, backend='threads'):
        """
        Initialize the evaluator.

        Args:
            workers: Worker threads (None = CPU count)
            chunk_rows: Rows of pixels per task for the 'threads' backend
            backend: 'threads', 'numba', 'gpu' or 'auto'
        """
        if chunk_rows < 1:
            raise ValueError(f"chunk_rows must be positive, got {chunk_rows}")
        if backend == 'auto':
            # Only default to GPU for CUDA; elsewhere the CPU kernels win
            backend = 'gpu' if TORCH_AVAILABLE and should_default_to_gpu() else 'threads'
        if backend not in ('threads', 'numba', 'gpu'):
            raise ValueError(f"Unknown backend {backend!r}")

        self.backend = backend
        self.workers = workers or os.cpu_count() or 1
        self.chunk_rows = chunk_rows
        self._executor = None
        self._gpu_compute = None
        self._closed = False

        if backend == 'threads':
            self._executor = ThreadPoolExecutor(
                max_workers=self.workers, thread_name_prefix='julia-worker'
            )
        elif backend == 'gpu':
            if not TORCH_AVAILABLE:
                raise RuntimeError("PyTorch not available, cannot use the 'gpu' backend")
            self._gpu_compute = get_gpu_compute(prefer_gpu=True)

    def describe(self):
        """Short human-readable description of the backend."""
        if self.backend == 'threads':
            return f"CPU thread pool ({self.workers} workers, {self.chunk_rows} rows/task)"
        if self.backend == 'numba':
            return "CPU (Numba parallel)"
        return self._gpu_compute.get_device_info()

    def evaluate(self, params):
        """
        Score every pixel of the viewport described by params.

        Returns:
            numpy array (height, width) of float64 escape scores. Empty if
            the viewport has zero area.
        """
        self._check_open()
        width, height = params.width, params.height
        if width <= 0 or height <= 0:
            return np.empty((max(height, 0), max(width, 0)), dtype=np.float64)

        if self.backend == 'gpu':
            return self._gpu_compute.compute_julia(params)
        if self.backend == 'numba':
            return compute_julia(
                params.x_min, params.x_max, params.y_top, params.y_bottom,
                width, height, params.c.real, params.c.imag,
                params.max_iter, params.escape_radius, params.post_escape,
            )

        # Fork: one task per chunk of rows
        futures = []
        for row_start in range(0, height, self.chunk_rows):
            row_end = min(row_start + self.chunk_rows, height)
            futures.append((row_start, row_end, self._executor.submit(
                compute_julia_rows,
                params.x_min, params.x_max, params.y_top, params.y_bottom,
                width, height, row_start, row_end,
                params.c.real, params.c.imag,
                params.max_iter, params.escape_radius, params.post_escape,
            )))

        # Join: wait for every chunk before handing scores on
        scores = np.empty((height, width), dtype=np.float64)
        for row_start, row_end, future in futures:
            scores[row_start:row_end] = future.result()
        return scores

    def evaluate_points(self, params, points):
        """
        Score a list of pixel coordinates.

        Args:
            params: FrameParams snapshot
            points: Sequence of (x, y) pixel coordinates

        Returns:
            1D numpy array of float64 scores, in the order of points.
        """
        self._check_open()
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if len(pts) == 0 or params.width <= 0 or params.height <= 0:
            return np.empty(0, dtype=np.float64)
        xs = np.ascontiguousarray(pts[:, 0])
        ys = np.ascontiguousarray(pts[:, 1])

        if self.backend == 'gpu':
            return self._gpu_compute.compute_julia_points(params, xs, ys)

        def run(start, end):
            return compute_julia_points(
                xs[start:end], ys[start:end],
                params.x_min, params.x_max, params.y_top, params.y_bottom,
                float(params.width), float(params.height),
                params.c.real, params.c.imag,
                params.max_iter, params.escape_radius, params.post_escape,
            )

        if self.backend == 'numba':
            return run(0, len(xs))

        chunk = max(1, self.chunk_rows * params.width)
        futures = [
            self._executor.submit(run, start, min(start + chunk, len(xs)))
            for start in range(0, len(xs), chunk)
        ]
        return np.concatenate([f.result() for f in futures])

    def _check_open(self):
        if self._closed:
            raise RuntimeError("evaluator is closed")

    def close(self):
        """Shut down the worker pool. Later evaluate calls raise RuntimeError."""
        self._closed = True
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
