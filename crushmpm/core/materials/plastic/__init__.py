# 文件: crushmpm/core/materials/plastic/__init__.py
"""
塑性模型组件模块

提供塑性本构的核心组件:
- 屈服函数 (yield_functions): CamCapYield
- 流动法则 (flow_rules): NonAssociatedFlow
- 硬化规律 (hardening): CompactionHardening
- 过渡函数 (transition): LinearToPlateau
- 返回映射 (return_mapping): ClosestPointReturn
"""

from .yield_functions import CamCapYield, friction_coefficient
from .flow_rules import NonAssociatedFlow
from .hardening import CompactionHardening
from .transition import LinearToPlateau
from .return_mapping import ClosestPointReturn, ReturnMappingResult

__all__ = [
    # 屈服函数
    'CamCapYield',
    'friction_coefficient',

    # 流动法则
    'NonAssociatedFlow',

    # 硬化规律
    'CompactionHardening',

    # 过渡函数
    'LinearToPlateau',

    # 返回映射
    'ClosestPointReturn',
    'ReturnMappingResult',
]
