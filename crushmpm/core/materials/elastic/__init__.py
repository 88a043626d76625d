# 文件: crushmpm/core/materials/elastic/__init__.py
"""
弹性模型模块

- IsotropicElastic: 各向同性线弹性
"""

from .isotropic import IsotropicElastic, check_elastic_parameters

__all__ = ['IsotropicElastic', 'check_elastic_parameters']
