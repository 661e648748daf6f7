# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Trellis — Optimizers & Learning-Rate Schedules                      ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Optimizer base class and the SGD / Adam / AdamW / Adagrad / RMSprop
implementations.

Every optimizer exposes a scalar ``learning_rate`` property, which makes
it a learning-rate controller that the schedulers in
:mod:`trellis.optim.lr_scheduler` can drive.  Update rules follow the
``torch.optim`` definitions and operate in place on
:class:`~trellis.nn.Parameter` arrays.
"""
from __future__ import annotations

import copy
import logging
import math
from typing import Iterable

import numpy as np

from ..nn.parameter import Parameter

logger = logging.getLogger(__name__)


def _check_non_negative(name: str, value: float):
    if not value >= 0.0:
        raise ValueError(f"Invalid {name} value: {value}")


class Optimizer:
    """Base class for all optimizers.

    ``params`` is an iterable of :class:`Parameter` objects, or of dicts
    each holding a ``'params'`` entry plus per-group hyper-parameter
    overrides.
    """

    def __init__(self, params, defaults: dict):
        self.defaults = defaults
        self.param_groups: list[dict] = []
        self.state: dict[int, dict] = {}

        if isinstance(params, Parameter):
            raise TypeError(
                "params argument given to the optimizer should be an "
                "iterable of Parameters or dicts, but got a Parameter")
        params = list(params)
        if len(params) == 0:
            raise ValueError("optimizer got an empty parameter list")
        if not isinstance(params[0], dict):
            params = [{'params': params}]
        for group in params:
            self.add_param_group(group)

        logger.debug("%s created with %d parameter group(s): %s",
                     type(self).__name__, len(self.param_groups),
                     {k: v for k, v in defaults.items()})

    # ---- Parameter groups ----

    def add_param_group(self, param_group: dict):
        """Add a group of parameters with optional hyper-parameter overrides."""
        if not isinstance(param_group, dict):
            raise TypeError(
                f"param group must be a dict, but got {type(param_group).__name__}")
        params = param_group.get('params')
        if params is None:
            raise ValueError("param group is missing a 'params' entry")
        if isinstance(params, Parameter):
            params = [params]
        else:
            params = list(params)
        for p in params:
            if not isinstance(p, Parameter):
                raise TypeError(
                    f"optimizer can only optimize Parameters, but one of the "
                    f"params is {type(p).__name__}")

        seen = {id(p) for g in self.param_groups for p in g['params']}
        if any(id(p) in seen for p in params):
            raise ValueError(
                "some parameters appear in more than one parameter group")

        group = {**self.defaults, **param_group, 'params': params}
        self._validate_group(group)
        self.param_groups.append(group)

    def _validate_group(self, group: dict):
        _check_non_negative('learning rate', group['lr'])

    # ---- Learning-rate controller ----

    @property
    def learning_rate(self) -> float:
        """The learning rate of the first parameter group."""
        return self.param_groups[0]['lr']

    @learning_rate.setter
    def learning_rate(self, value: float):
        value = float(value)
        _check_non_negative('learning rate', value)
        for group in self.param_groups:
            group['lr'] = value

    # ---- Training step ----

    def zero_grad(self, set_to_none: bool = True):
        for group in self.param_groups:
            for p in group['params']:
                p.zero_grad(set_to_none)

    def step(self):
        raise NotImplementedError

    def _params_with_grad(self, group: dict) -> Iterable[Parameter]:
        for p in group['params']:
            if p._grad is not None:
                yield p

    # ---- Checkpointing ----

    def state_dict(self) -> dict:
        """Return optimizer state with parameters replaced by their index."""
        index: dict[int, int] = {}
        groups = []
        for group in self.param_groups:
            packed = {k: v for k, v in group.items() if k != 'params'}
            packed['params'] = []
            for p in group['params']:
                index.setdefault(id(p), len(index))
                packed['params'].append(index[id(p)])
            groups.append(packed)
        state = {index[pid]: copy.deepcopy(st)
                 for pid, st in self.state.items() if pid in index}
        return {'state': state, 'param_groups': groups}

    def load_state_dict(self, state_dict: dict):
        groups = state_dict.get('param_groups', [])
        if len(groups) != len(self.param_groups):
            raise ValueError(
                "loaded state dict has a different number of parameter groups")
        for saved, group in zip(groups, self.param_groups):
            if len(saved['params']) != len(group['params']):
                raise ValueError(
                    "loaded state dict contains a parameter group that "
                    "doesn't match the size of optimizer's group")

        merged = []
        for saved, group in zip(groups, self.param_groups):
            candidate = {**group, **{k: v for k, v in saved.items() if k != 'params'}}
            self._validate_group(candidate)
            merged.append(candidate)

        by_index: dict[int, Parameter] = {}
        for saved, group, candidate in zip(groups, self.param_groups, merged):
            for idx, p in zip(saved['params'], group['params']):
                by_index[idx] = p
            group.update(candidate)

        self.state = {}
        for idx, st in state_dict.get('state', {}).items():
            p = by_index.get(int(idx))
            if p is not None:
                self.state[id(p)] = copy.deepcopy(st)

    def __repr__(self) -> str:
        lines = [f"{type(self).__name__} ("]
        for i, group in enumerate(self.param_groups):
            lines.append(f"Parameter Group {i}")
            for key in sorted(k for k in group if k != 'params'):
                lines.append(f"    {key}: {group[key]}")
        lines.append(")")
        return "\n".join(lines)


class SGD(Optimizer):
    """Stochastic gradient descent with optional (Nesterov) momentum."""

    def __init__(self, params, lr: float, momentum: float = 0.0,
                 dampening: float = 0.0, weight_decay: float = 0.0,
                 nesterov: bool = False):
        defaults = dict(lr=lr, momentum=momentum, dampening=dampening,
                        weight_decay=weight_decay, nesterov=nesterov)
        super().__init__(params, defaults)

    def _validate_group(self, group: dict):
        super()._validate_group(group)
        _check_non_negative('momentum', group['momentum'])
        _check_non_negative('weight_decay', group['weight_decay'])
        if group['nesterov'] and (group['momentum'] <= 0
                                  or group['dampening'] != 0):
            raise ValueError(
                "Nesterov momentum requires a momentum and zero dampening")

    def step(self):
        for group in self.param_groups:
            lr = group['lr']
            momentum = group['momentum']
            dampening = group['dampening']
            wd = group['weight_decay']
            nesterov = group['nesterov']

            for p in self._params_with_grad(group):
                d_p = p._grad
                if wd != 0:
                    d_p = d_p + wd * p._data

                if momentum != 0:
                    st = self.state.setdefault(id(p), {})
                    buf = st.get('momentum_buffer')
                    if buf is None:
                        buf = np.array(d_p, copy=True)
                        st['momentum_buffer'] = buf
                    else:
                        buf *= momentum
                        buf += (1.0 - dampening) * d_p
                    if nesterov:
                        d_p = d_p + momentum * buf
                    else:
                        d_p = buf

                p._data -= lr * d_p
                p._version += 1


class Adam(Optimizer):
    """Adam, with L2 weight decay folded into the gradient."""

    _decoupled_weight_decay = False

    def __init__(self, params, lr: float = 1e-3,
                 betas: tuple[float, float] = (0.9, 0.999),
                 eps: float = 1e-8,
                 weight_decay: float = 0.0,
                 amsgrad: bool = False):
        defaults = dict(lr=lr, betas=tuple(betas), eps=eps,
                        weight_decay=weight_decay, amsgrad=amsgrad)
        super().__init__(params, defaults)

    def _validate_group(self, group: dict):
        super()._validate_group(group)
        _check_non_negative('epsilon', group['eps'])
        _check_non_negative('weight_decay', group['weight_decay'])
        beta1, beta2 = group['betas']
        if not 0.0 <= beta1 < 1.0:
            raise ValueError(f"Invalid beta parameter at index 0: {beta1}")
        if not 0.0 <= beta2 < 1.0:
            raise ValueError(f"Invalid beta parameter at index 1: {beta2}")

    def step(self):
        for group in self.param_groups:
            lr = group['lr']
            beta1, beta2 = group['betas']
            eps = group['eps']
            wd = group['weight_decay']
            amsgrad = group['amsgrad']

            for p in self._params_with_grad(group):
                pid = id(p)
                if pid not in self.state:
                    self.state[pid] = {
                        'step': 0,
                        'm': np.zeros_like(p._data),
                        'v': np.zeros_like(p._data),
                    }
                    if amsgrad:
                        self.state[pid]['max_v'] = np.zeros_like(p._data)
                st = self.state[pid]
                st['step'] += 1
                t = st['step']
                m, v = st['m'], st['v']
                grad = p._grad

                if wd != 0:
                    if self._decoupled_weight_decay:
                        p._data *= (1.0 - lr * wd)
                    else:
                        grad = grad + wd * p._data

                m *= beta1
                m += (1.0 - beta1) * grad
                v *= beta2
                v += (1.0 - beta2) * (grad * grad)

                bc1 = 1.0 - beta1 ** t
                bc2 = 1.0 - beta2 ** t

                if amsgrad:
                    np.maximum(st['max_v'], v, out=st['max_v'])
                    denom = np.sqrt(st['max_v']) / math.sqrt(bc2)
                else:
                    denom = np.sqrt(v) / math.sqrt(bc2)
                denom += eps

                p._data -= (lr / bc1) * (m / denom)
                p._version += 1


class AdamW(Adam):
    """AdamW optimizer — decoupled weight decay regularization."""

    _decoupled_weight_decay = True

    def __init__(self, params, lr: float = 1e-3,
                 betas: tuple[float, float] = (0.9, 0.999),
                 eps: float = 1e-8,
                 weight_decay: float = 0.01,
                 amsgrad: bool = False):
        super().__init__(params, lr=lr, betas=betas, eps=eps,
                         weight_decay=weight_decay, amsgrad=amsgrad)


class Adagrad(Optimizer):
    """Adagrad — per-coordinate rates scaled by accumulated squared gradients."""

    def __init__(self, params, lr: float = 1e-2, lr_decay: float = 0.0,
                 weight_decay: float = 0.0,
                 initial_accumulator_value: float = 0.0,
                 eps: float = 1e-10):
        defaults = dict(lr=lr, lr_decay=lr_decay, weight_decay=weight_decay,
                        initial_accumulator_value=initial_accumulator_value,
                        eps=eps)
        super().__init__(params, defaults)

    def _validate_group(self, group: dict):
        super()._validate_group(group)
        _check_non_negative('lr_decay', group['lr_decay'])
        _check_non_negative('weight_decay', group['weight_decay'])
        _check_non_negative('initial_accumulator_value',
                            group['initial_accumulator_value'])
        _check_non_negative('epsilon', group['eps'])

    def step(self):
        for group in self.param_groups:
            lr = group['lr']
            wd = group['weight_decay']
            eps = group['eps']

            for p in self._params_with_grad(group):
                pid = id(p)
                if pid not in self.state:
                    self.state[pid] = {
                        'step': 0,
                        'sum': np.full_like(
                            p._data, group['initial_accumulator_value']),
                    }
                st = self.state[pid]
                st['step'] += 1
                grad = p._grad
                if wd != 0:
                    grad = grad + wd * p._data

                clr = lr / (1.0 + (st['step'] - 1) * group['lr_decay'])
                st['sum'] += grad * grad
                p._data -= clr * grad / (np.sqrt(st['sum']) + eps)
                p._version += 1


class RMSprop(Optimizer):
    """RMSprop, optionally centered and with momentum."""

    def __init__(self, params, lr: float = 1e-2, alpha: float = 0.99,
                 eps: float = 1e-8, weight_decay: float = 0.0,
                 momentum: float = 0.0, centered: bool = False):
        defaults = dict(lr=lr, alpha=alpha, eps=eps, weight_decay=weight_decay,
                        momentum=momentum, centered=centered)
        super().__init__(params, defaults)

    def _validate_group(self, group: dict):
        super()._validate_group(group)
        _check_non_negative('epsilon', group['eps'])
        _check_non_negative('momentum', group['momentum'])
        _check_non_negative('weight_decay', group['weight_decay'])
        _check_non_negative('alpha', group['alpha'])

    def step(self):
        for group in self.param_groups:
            lr = group['lr']
            alpha = group['alpha']
            eps = group['eps']
            wd = group['weight_decay']
            momentum = group['momentum']
            centered = group['centered']

            for p in self._params_with_grad(group):
                pid = id(p)
                if pid not in self.state:
                    st = {'step': 0, 'square_avg': np.zeros_like(p._data)}
                    if momentum > 0:
                        st['momentum_buffer'] = np.zeros_like(p._data)
                    if centered:
                        st['grad_avg'] = np.zeros_like(p._data)
                    self.state[pid] = st
                st = self.state[pid]
                st['step'] += 1
                grad = p._grad
                if wd != 0:
                    grad = grad + wd * p._data

                square_avg = st['square_avg']
                square_avg *= alpha
                square_avg += (1.0 - alpha) * (grad * grad)

                if centered:
                    grad_avg = st['grad_avg']
                    grad_avg *= alpha
                    grad_avg += (1.0 - alpha) * grad
                    avg = np.sqrt(square_avg - grad_avg * grad_avg) + eps
                else:
                    avg = np.sqrt(square_avg) + eps

                if momentum > 0:
                    buf = st['momentum_buffer']
                    buf *= momentum
                    buf += grad / avg
                    p._data -= lr * buf
                else:
                    p._data -= lr * grad / avg
                p._version += 1
