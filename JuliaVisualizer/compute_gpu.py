"""
GPU-accelerated Julia set computation using PyTorch.

This module provides a GPU-accelerated version of the escape-score
computation. It auto-detects available hardware:
- CUDA (NVIDIA GPUs)
- MPS (Apple Silicon)
- CPU fallback via PyTorch (still vectorized)

The GPU implementation processes all pixels simultaneously using
tensor operations. It follows the same recurrence as compute.py,
including the post-escape grace iterations, so it can stand in for the
CPU evaluator.

Usage:
    from compute_gpu import GPUCompute

    gpu = GPUCompute()
    if gpu.available:
        scores = gpu.compute_julia(params)
"""

import numpy as np

# Try to import PyTorch
try:
    import torch
    TORCH_AVAILABLE = True
except ImportError:
    TORCH_AVAILABLE = False
    torch = None


class GPUCompute:
    """
    GPU-accelerated escape-score computation.

    Automatically detects and uses the best available device:
    - CUDA for NVIDIA GPUs (recommended - significant speedup)
    - MPS for Apple Silicon (float32 only, so deep zooms lose precision)
    - CPU as fallback (still uses PyTorch vectorization)
    """

    def __init__(self, prefer_gpu=True):
        """
        Initialize GPU compute.

        Args:
            prefer_gpu: If False, force CPU even if GPU available
        """
        self.available = TORCH_AVAILABLE
        self.device = None
        self.device_name = "None"
        self.is_cuda = False
        self.dtype = None

        if not TORCH_AVAILABLE:
            return

        self.device = torch.device("cpu")
        self.device_name = "CPU (PyTorch)"
        self.dtype = torch.float64

        if prefer_gpu:
            if torch.cuda.is_available():
                self.device = torch.device("cuda")
                self.device_name = torch.cuda.get_device_name(0)
                self.is_cuda = True
            elif hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
                self.device = torch.device("mps")
                self.device_name = "Apple Silicon GPU (MPS)"
                self.dtype = torch.float32  # MPS only supports float32

    def get_device_info(self):
        """Return a string describing the compute device."""
        if not self.available:
            return "PyTorch not available"
        return f"{self.device_name} [{self.device}]"

    def _pixel_grid(self, params, xs, ys):
        """Map pixel coordinate tensors to complex plane coordinates."""
        zr = xs / params.width * (params.x_max - params.x_min) + params.x_min
        zi = ys / params.height * (params.y_bottom - params.y_top) + params.y_top
        return zr, zi

    def _escape_scores(self, zr, zi, cr, ci, max_iter, escape_radius, post_escape):
        """
        Run the recurrence on whole tensors of starting points.

        Each pixel keeps its own grace counter; pixels drop out of the
        active mask once their score is set.
        """
        scores = torch.full_like(zr, float(max_iter))
        post_iters = torch.zeros(zr.shape, device=self.device, dtype=torch.int64)
        active = torch.ones(zr.shape, device=self.device, dtype=torch.bool)

        for i in range(max_iter):
            new_zr = zr * zr - zi * zi + cr
            new_zi = 2 * zr * zi + ci
            zr = torch.where(active, new_zr, zr)
            zi = torch.where(active, new_zi, zi)

            norm = torch.hypot(zr, zi)
            over = active & (norm > escape_radius)
            in_grace = over & (post_iters <= post_escape)
            post_iters = post_iters + in_grace.to(torch.int64)

            escaped = over & ~in_grace
            if escaped.any():
                smooth = i - torch.log2(torch.log2(norm))
                scores = torch.where(escaped, smooth, scores)
                active = active & ~escaped
                if not active.any():
                    break

        return scores.cpu().to(torch.float64).numpy()

    def compute_julia(self, params):
        """
        Compute escape scores for the full viewport of a FrameParams.

        Returns:
            numpy array (height, width) of float64 escape scores
        """
        if not self.available:
            raise RuntimeError("PyTorch not available")

        xs = torch.arange(params.width, device=self.device, dtype=self.dtype)
        ys = torch.arange(params.height, device=self.device, dtype=self.dtype)
        # Shape (height, width), row index first
        ys, xs = torch.meshgrid(ys, xs, indexing='ij')
        zr, zi = self._pixel_grid(params, xs, ys)
        return self._escape_scores(
            zr, zi, params.c.real, params.c.imag,
            params.max_iter, params.escape_radius, params.post_escape,
        )

    def compute_julia_points(self, params, xs, ys):
        """
        Compute escape scores for arrays of pixel coordinates.

        Returns:
            1D numpy array of float64 escape scores
        """
        if not self.available:
            raise RuntimeError("PyTorch not available")

        xs_t = torch.from_numpy(np.asarray(xs, dtype=np.float64)).to(self.device, self.dtype)
        ys_t = torch.from_numpy(np.asarray(ys, dtype=np.float64)).to(self.device, self.dtype)
        zr, zi = self._pixel_grid(params, xs_t, ys_t)
        return self._escape_scores(
            zr, zi, params.c.real, params.c.imag,
            params.max_iter, params.escape_radius, params.post_escape,
        )


# Global instance for easy access
_gpu_compute = None


def get_gpu_compute(prefer_gpu=True):
    """
    Get the global GPU compute instance.

    Creates the instance on first call.

    Args:
        prefer_gpu: If False, force CPU mode

    Returns:
        GPUCompute instance
    """
    global _gpu_compute
    if _gpu_compute is None:
        _gpu_compute = GPUCompute(prefer_gpu=prefer_gpu)
    return _gpu_compute


def should_default_to_gpu():
    """
    Check if GPU should be enabled by default.

    Returns True only for CUDA GPUs where GPU acceleration provides
    a clear benefit. For MPS (Apple Silicon), the Numba CPU implementation
    is typically faster and keeps float64 precision, so we default to CPU.
    """
    if not TORCH_AVAILABLE:
        return False
    return get_gpu_compute().is_cuda
