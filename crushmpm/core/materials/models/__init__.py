# 文件: crushmpm/core/materials/models/__init__.py
"""
预置本构模型

- LinearElastic: 线弹性 (HookeElasticity)
- SinfoniettaClassica: 非关联锥-帽模型
- SinfoniettaCrush: 耦合颗粒破碎的锥-帽模型
"""

from .parameters import ElasticParameters, CapParameters, CrushParameters
from .linear_elastic import LinearElastic
from .sinfonietta import SinfoniettaClassica, SinfoniettaCrush

__all__ = [
    'ElasticParameters',
    'CapParameters',
    'CrushParameters',
    'LinearElastic',
    'SinfoniettaClassica',
    'SinfoniettaCrush',
]
