# 文件: crushmpm/core/materials/models/sinfonietta.py
"""
Sinfonietta 锥-帽弹塑性模型族

使用组合模式将弹性模型、屈服函数、流动法则、硬化规律和返回映射算法组合成完整的本构:
- SinfoniettaClassica: 非关联锥-帽模型，pc 随塑性压缩硬化
- SinfoniettaCrush: 在此基础上耦合颗粒破碎 (可释放孔隙率 φ* 及其过渡函数)

单步单点流程:
    应变增量 -> 弹性试探应力 -> 屈服判断 -> 接受 或 返回映射 -> 提交 -> 更新 φ*
"""

from typing import IO, Optional

import numpy as np

from ..errors import MaterialParameterError, ReturnMappingError
from ..interfaces import ConstitutiveModel, StressResult, symmetrize, tensor_to_voigt
from ..state import MaterialPoint
from ..elastic.isotropic import IsotropicElastic
from ..plastic.yield_functions import CamCapYield, friction_coefficient
from ..plastic.flow_rules import NonAssociatedFlow
from ..plastic.hardening import CompactionHardening
from ..plastic.transition import LinearToPlateau
from ..plastic.return_mapping import ClosestPointReturn, ReturnMappingResult
from ....utils.param_reader import TokenReader, format_parameters
from .parameters import CapParameters, CrushParameters


class SinfoniettaClassica(ConstitutiveModel):
    """
    非关联锥-帽弹塑性模型 (无颗粒破碎)

    组件:
    - 弹性: IsotropicElastic
    - 屈服: CamCapYield (摩擦系数 z 由 varphi 换算并缓存)
    - 流动: NonAssociatedFlow (beta)
    - 硬化: CompactionHardening (beta_p, kappa)
    - 返回映射: ClosestPointReturn

    Example:
        model = SinfoniettaClassica(young=200e6, poisson=0.2, pc0=1e5)
        model.init(point)
        result = model.update_strain_and_stress(context, p)
    """

    REGISTRATION_NAME = 'SinfoniettaClassica'
    PARAMETERS = CapParameters

    def __init__(
        self,
        young: float = 200.0e6,
        poisson: float = 0.2,
        yield_tol: float = 1e-8,
        max_iter: int = 50,
        epsilon_pressure: float = 1e-13,
        **params
    ):
        """
        Args:
            young: 杨氏模量
            poisson: 泊松比
            yield_tol: 屈服容差
            max_iter: 返回映射迭代上限
            epsilon_pressure: 压力下限
            **params: 其余本构参数 (见 PARAMETERS 的字段)

        Raises:
            MaterialParameterError: 参数未知或超出有效范围
        """
        self.yield_tol = float(yield_tol)
        self.max_iter = int(max_iter)
        self.epsilon_pressure = float(epsilon_pressure)
        self.elastic: Optional[IsotropicElastic] = None
        self.set_parameters(self._make_parameters(young=young, poisson=poisson, **params))

    @classmethod
    def _make_parameters(cls, **values):
        known = cls.PARAMETERS.field_names()
        for key in values:
            if key not in known:
                raise MaterialParameterError(key, values[key], f"unknown parameter for {cls.REGISTRATION_NAME}")
        return cls.PARAMETERS(**values)

    # ------------------------------------------------------------------
    # 参数与组件
    # ------------------------------------------------------------------

    def set_parameters(self, params: CapParameters) -> None:
        """
        替换参数记录并重建依赖组件 (弹性矩阵和 z 随之失效重算)
        """
        if not isinstance(params, self.PARAMETERS):
            raise TypeError(f"{type(self).__name__} expects {self.PARAMETERS.__name__}, got {type(params).__name__}")
        self.params = params

        if self.elastic is None:
            self.elastic = IsotropicElastic(params.young, params.poisson)
        elif (self.elastic.E, self.elastic.nu) != (params.young, params.poisson):
            self.elastic.set_parameters(params.young, params.poisson)

        self.z = friction_coefficient(params.varphi)
        self.yield_fn = CamCapYield(self.z, self.epsilon_pressure)
        self.flow = NonAssociatedFlow(self.yield_fn, params.beta)
        self.hardening = CompactionHardening(
            self.yield_fn, params.beta_p, params.kappa, transition=self._make_transition(params)
        )
        self.return_mapping = ClosestPointReturn(
            self.elastic, self.yield_fn, self.flow, self.hardening,
            yield_tol=self.yield_tol, max_iter=self.max_iter
        )

    def _make_transition(self, params) -> Optional[LinearToPlateau]:
        return None

    def get_registration_name(self) -> str:
        return self.REGISTRATION_NAME

    def get_young(self) -> float:
        return self.params.young

    def get_poisson(self) -> float:
        return self.params.poisson

    # ------------------------------------------------------------------
    # 序列化
    # ------------------------------------------------------------------

    def read(self, stream: IO[str]) -> None:
        """
        读取 "<注册名> v1 v2 ..."，字段顺序与 PARAMETERS 声明顺序一致
        """
        reader = stream if isinstance(stream, TokenReader) else TokenReader(stream)
        reader.expect(self.REGISTRATION_NAME)
        self.read_parameters(reader)

    def read_parameters(self, reader: TokenReader) -> None:
        """读取注册名之后的参数 (注册名已由工厂消耗)"""
        names = self.PARAMETERS.field_names()
        values = reader.read_floats(names)
        self.set_parameters(self.PARAMETERS(*values))

    def write(self, stream: IO[str]) -> None:
        stream.write(format_parameters(self.REGISTRATION_NAME, self.params.values()))

    # ------------------------------------------------------------------
    # 物质点
    # ------------------------------------------------------------------

    def init(self, point: MaterialPoint) -> None:
        """
        初始化物质点的历史变量

        塑性应变清零，pc = pc0。若宿主给定的初始应力位于初始屈服面之外，
        则提高 pc 使该点处于正常固结状态 (f = 0)。

        Raises:
            MaterialParameterError: 初始应力为拉应力且位于屈服面之外
        """
        point.plastic_strain = np.zeros(6)
        point.pc = self.params.pc0
        point.delta_lambda = 0.0
        point.is_plastic = False

        if self.yield_fn.evaluate(point.stress, point.pc) > self.yield_tol:
            p, qd = self.yield_fn.invariants(point.stress)
            if p <= self.epsilon_pressure:
                raise MaterialParameterError(
                    'stress', p, "initial stress is tensile and outside the initial yield surface"
                )
            point.pc = p + qd * qd / (self.z * self.z * p)

    def yield_value(self, point: MaterialPoint) -> float:
        """物质点当前状态的屈服函数值"""
        return self.yield_fn.evaluate(point.stress, point.pc)

    def update_strain_and_stress(self, context, p: int) -> StressResult:
        """
        单点单步应力更新

        Args:
            context: 宿主仿真上下文 (get_strain_increment, get_point)
            p: 物质点索引

        Returns:
            StressResult

        Raises:
            ReturnMappingError: 返回映射不收敛 (物质点状态保持不变)
        """
        point = context.get_point(p)
        d_strain = tensor_to_voigt(symmetrize(context.get_strain_increment(p)), engineering=True)

        # 1. 弹性试探应力
        stress_trial = self.elastic.update(point.stress, d_strain)

        # 2. 屈服判断 + 返回映射
        try:
            rm = self.return_mapping.apply(stress_trial, point.pc, point.plastic_strain)
        except ReturnMappingError as exc:
            raise exc.at_point(p)

        # 3. 提交
        self._commit(point, rm)

        return StressResult(
            stress=point.stress.copy(),
            tangent=rm.tangent,
            state=point,
            is_plastic=rm.is_plastic,
            delta_lambda=rm.delta_lambda,
            iterations=rm.iterations,
            yield_value=rm.yield_value
        )

    def _commit(self, point: MaterialPoint, rm: ReturnMappingResult) -> None:
        point.stress = rm.stress
        point.delta_lambda = rm.delta_lambda
        point.is_plastic = rm.is_plastic
        if rm.is_plastic:
            point.plastic_strain = rm.plastic_strain
            point.pc = rm.q

    def __repr__(self) -> str:
        p = self.params
        return (
            f"{type(self).__name__}(E={p.young:.2e}, nu={p.poisson:.3f}, beta={p.beta}, "
            f"beta_p={p.beta_p:.2e}, varphi={p.varphi}, pc0={p.pc0:.2e})"
        )


class SinfoniettaCrush(SinfoniettaClassica):
    """
    可破碎颗粒材料的锥-帽模型

    在 SinfoniettaClassica 的基础上:
    - 硬化速率乘以破碎系数 φ*0/φ* (可释放孔隙消耗越多硬化越强)
    - 每个塑性步之后由累积塑性体应变直接给出 φ* = b(εv_p)，
      b 为 LinearToPlateau(epv0, phi_star0, ginf, l0)

    Example:
        model = SinfoniettaCrush(young=200e6, poisson=0.2, pc0=1e5,
                                 phi_star0=0.4, ginf=0.1, epv0=0.01, l0=0.001)
    """

    REGISTRATION_NAME = 'SinfoniettaCrush'
    PARAMETERS = CrushParameters

    def _make_transition(self, params: CrushParameters) -> LinearToPlateau:
        self.bfunc = LinearToPlateau(x0=params.epv0, y0=params.phi_star0, yinf=params.ginf, l0=params.l0)
        return self.bfunc

    def init(self, point: MaterialPoint) -> None:
        super().init(point)
        point.phi_star = self.params.phi_star0

    def _commit(self, point: MaterialPoint, rm: ReturnMappingResult) -> None:
        super()._commit(point, rm)
        if rm.is_plastic:
            point.phi_star = self.bfunc(point.plastic_volumetric_strain)

    def __repr__(self) -> str:
        p = self.params
        return (
            super().__repr__()[:-1]
            + f", phi_star0={p.phi_star0}, ginf={p.ginf}, epv0={p.epv0:.2e}, l0={p.l0:.2e})"
        )
