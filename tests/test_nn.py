"""
Tests for trellis.nn — Parameter and clip_grad_norm_.
"""
import math

import numpy as np
import pytest

import trellis
import trellis.nn as nn
from trellis.nn.utils import clip_grad_norm_


def test_parameter_copies_input():
    src = np.array([1.0, 2.0, 3.0])
    p = nn.Parameter(src)
    src[0] = 100.0
    assert p.data[0] == 1.0
    assert p.shape == (3,)
    assert p.ndim == 1
    assert p.numel() == 3
    assert p.requires_grad
    assert trellis.Parameter is nn.Parameter


def test_parameter_dtypes():
    assert nn.Parameter([1, 2]).dtype == np.float32
    assert nn.Parameter(np.zeros(2)).dtype == np.float64
    assert nn.Parameter([1, 2], dtype=np.float64).dtype == np.float64
    assert nn.Parameter().numel() == 0


def test_parameter_grad_shape_checked():
    p = nn.Parameter(np.zeros((2, 3)))
    p.grad = np.ones((2, 3))
    assert p.grad.dtype == p.dtype
    with pytest.raises(ValueError):
        p.grad = np.ones(6)
    p.grad = None
    assert p.grad is None


def test_parameter_data_setter_bumps_version():
    p = nn.Parameter(np.zeros(2))
    p.data = [1.0, 2.0]
    assert p._version == 1
    np.testing.assert_array_equal(p.numpy(), [1.0, 2.0])
    with pytest.raises(ValueError):
        p.data = [1.0, 2.0, 3.0]


def test_parameter_repr():
    assert repr(nn.Parameter([1.0])).startswith("Parameter containing:")


def test_clip_grad_norm_l2():
    p = nn.Parameter(np.zeros(2))
    p.grad = np.array([3.0, 4.0])
    total = clip_grad_norm_([p], max_norm=1.0)
    assert total == pytest.approx(5.0)
    np.testing.assert_allclose(p.grad, [0.6, 0.8], rtol=1e-5)


def test_clip_grad_norm_under_threshold_untouched():
    p = nn.Parameter(np.zeros(2))
    grad = np.array([0.3, 0.4])
    p.grad = grad
    total = clip_grad_norm_(p, max_norm=1.0)
    assert total == pytest.approx(0.5)
    np.testing.assert_array_equal(p.grad, [0.3, 0.4])


def test_clip_grad_norm_inf_and_p_norms():
    a = nn.Parameter(np.zeros(2))
    b = nn.Parameter(np.zeros(1))
    a.grad = np.array([1.0, -6.0])
    b.grad = np.array([2.0])
    assert nn.utils.clip_grad_norm_([a, b], 100.0, norm_type=math.inf) == 6.0
    assert nn.utils.clip_grad_norm_([a, b], 100.0, norm_type=1) == pytest.approx(9.0)


def test_clip_grad_norm_does_not_mutate_caller_buffer():
    p = nn.Parameter(np.zeros(2))
    grad = np.array([3.0, 4.0])
    p.grad = grad
    clip_grad_norm_([p], max_norm=1.0)
    np.testing.assert_array_equal(grad, [3.0, 4.0])


def test_clip_grad_norm_without_grads():
    assert clip_grad_norm_([nn.Parameter(np.zeros(2))], 1.0) == 0.0


@pytest.mark.parametrize("norm_type", [math.inf, 2.0, 1.0])
def test_clip_grad_norm_empty_grad(norm_type):
    empty = nn.Parameter()
    empty.grad = np.empty(0, dtype=np.float32)
    full = nn.Parameter(np.zeros(2))
    full.grad = np.array([3.0, -4.0])
    assert clip_grad_norm_([empty], 1.0, norm_type=norm_type) == 0.0
    total = clip_grad_norm_([empty, full], 100.0, norm_type=norm_type)
    assert total == pytest.approx({math.inf: 4.0, 2.0: 5.0, 1.0: 7.0}[norm_type])
    assert empty.grad.shape == (0,)
