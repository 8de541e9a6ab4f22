"""Layer blueprints and their constructed counterparts."""

from .base import Blueprint, Layer
from .dense import Dense, DenseLayer
from .dropout import Dropout, DropoutLayer
from .isolate import Isolate, IsolateLayer
from .lock import Lock, LockedLayer
from .normalize import Normalize, NormalizeLayer
from .one_hot import OneHot, OneHotLayer
from .reshape import Flatten, Reshape, ReshapeLayer
from .softmax import Softmax, SoftmaxLayer

__all__ = [
    "Blueprint",
    "Layer",
    "Dense",
    "DenseLayer",
    "Dropout",
    "DropoutLayer",
    "Isolate",
    "IsolateLayer",
    "OneHot",
    "OneHotLayer",
    "Flatten",
    "Reshape",
    "ReshapeLayer",
    "Lock",
    "LockedLayer",
    "Normalize",
    "NormalizeLayer",
    "Softmax",
    "SoftmaxLayer",
]
