import numpy as np
import pytest

from JuliaVisualizer.config import MAX_ITERS
from JuliaVisualizer import evaluator as evaluator_module
from JuliaVisualizer.compute_gpu import GPUCompute
from JuliaVisualizer.evaluator import FieldEvaluator
from JuliaVisualizer.view import ViewState


@pytest.fixture(scope="module")
def evaluator():
    with FieldEvaluator(workers=4, chunk_rows=16) as ev:
        yield ev


def test_center_of_viewport_never_escapes(evaluator):
    params = ViewState(boundary=1.5).frame_params(400, 400)
    scores = evaluator.evaluate(params)
    assert scores.shape == (400, 400)
    assert scores[200, 200] == MAX_ITERS


def test_threads_match_numba_backend(evaluator):
    state = ViewState(boundary=1.2, x_offset=0.1, c=complex(-0.8, 0.156))
    # 37 rows does not divide into 16-row chunks
    params = state.frame_params(53, 37, max_iter=120)
    threaded = evaluator.evaluate(params)
    with FieldEvaluator(backend="numba") as numba_ev:
        parallel = numba_ev.evaluate(params)
    np.testing.assert_array_equal(threaded, parallel)


def test_evaluate_points_matches_grid(evaluator):
    params = ViewState(c=complex(0.285, 0.01)).frame_params(30, 20, max_iter=80)
    grid = evaluator.evaluate(params)
    points = [(x, y) for y in range(20) for x in range(30)]
    scores = evaluator.evaluate_points(params, points)
    np.testing.assert_array_equal(scores, grid.ravel())


def test_evaluate_points_empty(evaluator):
    params = ViewState().frame_params(10, 10)
    assert evaluator.evaluate_points(params, []).shape == (0,)


def test_zero_area_viewport(evaluator):
    assert evaluator.evaluate(ViewState().frame_params(0, 10)).shape == (10, 0)
    assert evaluator.evaluate(ViewState().frame_params(10, 0)).shape == (0, 10)


def test_one_pixel_viewport(evaluator):
    scores = evaluator.evaluate(ViewState().frame_params(1, 1))
    assert scores.shape == (1, 1)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        FieldEvaluator(backend="opencl")
    with pytest.raises(ValueError):
        FieldEvaluator(chunk_rows=0)


def test_close_shuts_down_pool():
    ev = FieldEvaluator(workers=1)
    ev.close()
    assert ev._executor is None
    ev.close()


@pytest.mark.parametrize("backend", ["threads", "numba"])
def test_closed_evaluator_refuses_work(backend):
    ev = FieldEvaluator(workers=1, backend=backend)
    ev.close()
    params = ViewState().frame_params(4, 4)
    with pytest.raises(RuntimeError, match="evaluator is closed"):
        ev.evaluate(params)
    with pytest.raises(RuntimeError, match="evaluator is closed"):
        ev.evaluate_points(params, [(0, 0)])


def test_describe():
    with FieldEvaluator(workers=3, chunk_rows=8) as ev:
        assert "3 workers" in ev.describe()


def test_gpu_backend_matches_cpu(evaluator):
    torch = pytest.importorskip("torch")
    ev = FieldEvaluator(backend="gpu")
    if ev._gpu_compute.dtype != torch.float64:
        pytest.skip("GPU device has no float64 support")
    params = ViewState(c=complex(-0.4, 0.6)).frame_params(32, 24, max_iter=60)
    np.testing.assert_allclose(ev.evaluate(params), evaluator.evaluate(params),
                               rtol=1e-9, atol=1e-9)
    points = [(0, 0), (16, 12), (31, 23)]
    np.testing.assert_allclose(ev.evaluate_points(params, points),
                               evaluator.evaluate_points(params, points),
                               rtol=1e-9, atol=1e-9)


def test_auto_backend_uses_threads_without_cuda(monkeypatch):
    monkeypatch.setattr(evaluator_module, "should_default_to_gpu", lambda: False)
    with FieldEvaluator(workers=1, backend="auto") as ev:
        assert ev.backend == "threads"


def test_cpu_torch_device_flags():
    pytest.importorskip("torch")
    gpu = GPUCompute(prefer_gpu=False)
    assert not gpu.is_cuda
    assert "CPU" in gpu.get_device_info()
    assert not hasattr(gpu, "is_gpu")
    assert not hasattr(gpu, "is_mps")
