# 文件: crushmpm/core/materials/models/parameters.py
"""
本构参数记录

每种材料类型一份不可变参数记录，构造时检查范围。
字段声明顺序即文本序列化顺序。

- ElasticParameters: young, poisson
- CapParameters: + beta, beta_p, kappa, varphi, pc0
- CrushParameters: + phi_star0, ginf, epv0, l0
"""

import math
from dataclasses import astuple, dataclass, fields
from typing import Tuple

from ..errors import MaterialParameterError


def _check(name: str, value: float, ok: bool, reason: str) -> None:
    if not math.isfinite(value) or not ok:
        raise MaterialParameterError(name, value, reason)


@dataclass(frozen=True)
class ElasticParameters:
    """
    弹性参数

    Attributes:
        young: 杨氏模量 E > 0
        poisson: 泊松比 ν ∈ (-1, 0.5)
    """
    young: float = 200.0e6
    poisson: float = 0.2

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            try:
                object.__setattr__(self, f.name, float(value))
            except (TypeError, ValueError):
                raise MaterialParameterError(f.name, value, "must be a real number") from None
        self.validate()

    def validate(self) -> None:
        _check('young', self.young, self.young > 0, "Young's modulus must be positive")
        _check('poisson', self.poisson, -1.0 < self.poisson < 0.5, "Poisson's ratio must be in (-1, 0.5)")

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def values(self) -> Tuple[float, ...]:
        return astuple(self)


@dataclass(frozen=True)
class CapParameters(ElasticParameters):
    """
    锥-帽塑性参数

    Attributes:
        beta: 非关联特征 (beta = 3 为关联流动)，>= 0
        beta_p: 塑性柔度 (1/H)，> 0
        kappa: 剪切硬化参数 (常为 0)，>= 0
        varphi: 临界状态摩擦角 (度)，∈ (0, 90)
        pc0: 初始前期固结压力，> 0
    """
    beta: float = 3.0
    beta_p: float = 1.0e-6
    kappa: float = 0.0
    varphi: float = 30.0
    pc0: float = 1.0e5

    def validate(self) -> None:
        super().validate()
        _check('beta', self.beta, self.beta >= 0, "must be non-negative")
        _check('beta_p', self.beta_p, self.beta_p > 0, "plastic compliance must be positive")
        _check('kappa', self.kappa, self.kappa >= 0, "must be non-negative")
        _check('varphi', self.varphi, 0.0 < self.varphi < 90.0, "friction angle must be in (0, 90) degrees")
        _check('pc0', self.pc0, self.pc0 > 0, "pre-consolidation pressure must be positive")


@dataclass(frozen=True)
class CrushParameters(CapParameters):
    """
    颗粒破碎参数

    Attributes:
        phi_star0: 初始可释放孔隙率，∈ (0, 1)
        ginf: 平台孔隙率，∈ (0, 1)
        epv0: 破碎起始的塑性体应变阈值，> 0
        l0: 过渡长度尺度，> 0
    """
    phi_star0: float = 0.4
    ginf: float = 0.1
    epv0: float = 0.01
    l0: float = 0.001

    def validate(self) -> None:
        super().validate()
        _check('phi_star0', self.phi_star0, 0.0 < self.phi_star0 < 1.0, "porosity must be in (0, 1)")
        _check('ginf', self.ginf, 0.0 < self.ginf < 1.0, "porosity must be in (0, 1)")
        _check('epv0', self.epv0, self.epv0 > 0, "volumetric strain threshold must be positive")
        _check('l0', self.l0, self.l0 > 0, "transition length must be positive")
