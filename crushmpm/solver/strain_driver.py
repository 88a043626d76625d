# 文件: crushmpm/solver/strain_driver.py
"""
应变路径驱动器 (单物质点)

沿给定的应变增量序列驱动一个物质点，相当于宿主步进循环的最小实现:

特性：
1. 逐步调用本构模型的 update_strain_and_stress
2. 返回映射不收敛时回滚并细分增量 (Cutback)
3. 记录每步的应力、pc、φ* 和屈服函数值
"""

from typing import Iterable, List, Optional

import numpy as np

from ..core.materials.errors import ReturnMappingError
from ..core.materials.state import MaterialPoint
from ..core.materials.plastic.yield_functions import deviatoric_norm, mean_pressure
from .point_cloud import PointCloud


def isotropic_path(total_volumetric_strain: float, n_steps: int) -> List[np.ndarray]:
    """
    各向等压路径: 每步 Δε = -(εv/3n) I (εv > 0 为压缩)
    """
    de = -total_volumetric_strain / (3.0 * n_steps)
    return [de * np.eye(3) for _ in range(n_steps)]


def oedometric_path(total_axial_strain: float, n_steps: int, axis: int = 2) -> List[np.ndarray]:
    """
    侧限压缩路径: 只有 axis 方向的压缩应变
    """
    d = np.zeros((3, 3))
    d[axis, axis] = -total_axial_strain / n_steps
    return [d.copy() for _ in range(n_steps)]


def shear_path(total_shear_strain: float, n_steps: int, i: int = 0, j: int = 1) -> List[np.ndarray]:
    """
    简单剪切路径: 工程剪应变 γ_ij 总量为 total_shear_strain
    """
    d = np.zeros((3, 3))
    d[i, j] = d[j, i] = 0.5 * total_shear_strain / n_steps
    return [d.copy() for _ in range(n_steps)]


class StrainPathDriver:
    """
    单物质点应变路径驱动器

    Args:
        model: 本构模型 (ConstitutiveModel)
        point: 物质点 (None 时新建并调用 model.init)
        config: 配置字典 (max_cutbacks, log_header)

    Example:
        driver = StrainPathDriver(model)
        history = driver.run(isotropic_path(0.03, 10))
        print(history[-1]['pc'])
    """

    def __init__(self, model, point: Optional[MaterialPoint] = None, config: Optional[dict] = None):
        self.model = model
        if point is None:
            point = MaterialPoint()
            model.init(point)
        self.point = point
        self.context = PointCloud([point])

        self.config = {
            "max_cutbacks": 6,    # 最多细分 2^6 份
            "log_header": True,
        }
        if config:
            self.config.update(config)
        if int(self.config["max_cutbacks"]) < 0:
            raise ValueError(f"max_cutbacks must be >= 0, got {self.config['max_cutbacks']}")

        self.history: List[dict] = []
        self.log_callback = print

    def set_log_callback(self, callback):
        self.log_callback = callback

    def _apply(self, strain_increment: np.ndarray, n_sub: int) -> bool:
        """把增量分成 n_sub 份依次施加，返回是否有塑性子步"""
        self.context.set_strain_increment(0, np.asarray(strain_increment, dtype=float) / n_sub)
        plastic = False
        for _ in range(n_sub):
            result = self.model.update_strain_and_stress(self.context, 0)
            plastic = plastic or result.is_plastic
        return plastic

    def step(self, strain_increment: np.ndarray) -> dict:
        """
        施加一个应变增量，不收敛时回滚并二分细分

        Returns:
            本步记录

        Raises:
            ReturnMappingError: 细分到上限仍不收敛
        """
        saved = self.point.copy()
        max_cutbacks = int(self.config.get("max_cutbacks", 6))

        n_sub = 1
        for cutback in range(max_cutbacks + 1):
            try:
                plastic = self._apply(strain_increment, n_sub)
                break
            except ReturnMappingError as exc:
                self.point.assign(saved)
                if cutback == max_cutbacks:
                    self.log_callback("Step too small, aborting.")
                    raise
                n_sub *= 2
                self.log_callback(f">>> Cutback: {n_sub} sub-increments ({exc})")

        record = self._record(n_sub, plastic)
        self.history.append(record)
        return record

    def run(self, increments: Iterable[np.ndarray]) -> List[dict]:
        """沿应变增量序列驱动，返回全部记录"""
        if self.config.get("log_header", True):
            self.log_callback(f"{'STEP':<5} | {'p':<11} | {'qd':<11} | {'pc':<11} | {'phi*':<7} | {'SUB':<4} | {'STATUS'}")
            self.log_callback("-" * 72)

        for d_eps in increments:
            rec = self.step(d_eps)
            status = "Plastic" if rec['is_plastic'] else "Elastic"
            self.log_callback(
                f"{rec['step']:<5} | {rec['p']:.4e} | {rec['qd']:.4e} | {rec['pc']:.4e} | "
                f"{rec['phi_star']:.4f}  | {rec['substeps']:<4} | {status}"
            )
        return self.history

    def _record(self, n_sub: int, plastic: bool) -> dict:
        point = self.point
        yield_fn = getattr(self.model, 'yield_fn', None)
        f = yield_fn.evaluate(point.stress, point.pc) if yield_fn is not None else float('-inf')
        p, qd = mean_pressure(point.stress), deviatoric_norm(point.stress)
        return {
            'step': len(self.history) + 1,
            'stress': point.stress.copy(),
            'plastic_strain': point.plastic_strain.copy(),
            'p': p,
            'qd': qd,
            'pc': point.pc,
            'phi_star': point.phi_star,
            'epv': point.plastic_volumetric_strain,
            'yield_value': f,
            'is_plastic': plastic,
            'substeps': n_sub,
        }
