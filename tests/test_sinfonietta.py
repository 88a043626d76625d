# 文件: tests/test_sinfonietta.py
"""
本构模型测试: 参数、序列化、工厂与单点应力更新
"""

import io

import numpy as np
import pytest
from crushmpm.core.materials import (
    MaterialFactory,
    MaterialPoint,
    LinearElastic,
    SinfoniettaClassica,
    SinfoniettaCrush,
    CapParameters,
    CrushParameters,
    MaterialParameterError,
    ParameterStreamError,
    ReturnMappingError,
    tensor_to_voigt,
    tensor_to_stress,
)
from crushmpm.solver import PointCloud, StrainPathDriver, isotropic_path


def _quiet_driver(model, point=None, **config):
    config.setdefault('log_header', False)
    driver = StrainPathDriver(model, point=point, config=config)
    driver.set_log_callback(lambda msg: None)
    return driver


class TestParameters:
    """测试参数记录"""

    def test_defaults(self):
        params = CrushParameters()
        assert params.beta == 3.0
        assert params.beta_p == 1e-6
        assert params.kappa == 0.0
        assert params.phi_star0 == 0.4
        assert params.ginf == 0.1

    def test_field_order(self):
        assert CrushParameters.field_names() == (
            'young', 'poisson', 'beta', 'beta_p', 'kappa', 'varphi', 'pc0',
            'phi_star0', 'ginf', 'epv0', 'l0'
        )

    @pytest.mark.parametrize("field, value", [
        ('young', -1.0),
        ('young', float('nan')),
        ('poisson', 0.5),
        ('beta', -0.1),
        ('beta_p', 0.0),
        ('kappa', -1.0),
        ('varphi', 90.0),
        ('pc0', 0.0),
        ('phi_star0', 1.0),
        ('ginf', 0.0),
        ('epv0', 0.0),
        ('l0', -1e-3),
    ])
    def test_out_of_range(self, field, value):
        with pytest.raises(MaterialParameterError) as exc_info:
            CrushParameters(**{field: value})
        assert exc_info.value.field == field

    def test_not_a_number(self):
        with pytest.raises(MaterialParameterError) as exc_info:
            CapParameters(young='abc')
        assert exc_info.value.field == 'young'

    def test_unknown_parameter(self):
        with pytest.raises(MaterialParameterError) as exc_info:
            SinfoniettaCrush(foo=1.0)
        assert exc_info.value.field == 'foo'

        # 破碎参数不属于 Classica
        with pytest.raises(MaterialParameterError):
            SinfoniettaClassica(phi_star0=0.4)

    def test_set_parameters_type(self):
        model = SinfoniettaCrush()
        with pytest.raises(TypeError):
            model.set_parameters(CapParameters())

    def test_set_parameters_rebuilds_components(self):
        model = SinfoniettaCrush()
        elastic = model.elastic
        D_old = elastic.D
        model.set_parameters(CrushParameters(young=100e6, varphi=20.0, phi_star0=0.3))

        assert model.elastic is elastic
        assert model.elastic.D is not D_old
        assert model.get_young() == 100e6
        assert model.z < 1.2
        assert model.bfunc.y0 == 0.3


class TestSerialization:
    """测试文本读写"""

    def test_write_format(self):
        buf = io.StringIO()
        SinfoniettaCrush().write(buf)
        tokens = buf.getvalue().split()
        assert tokens[0] == 'SinfoniettaCrush'
        assert len(tokens) == 1 + len(CrushParameters.field_names())

    def test_roundtrip(self):
        model = SinfoniettaCrush(
            young=1.5e8, poisson=0.25, beta=2.0, beta_p=3.3e-7, kappa=0.1,
            varphi=33.3, pc0=2.5e5, phi_star0=0.35, ginf=0.05, epv0=0.02, l0=0.003
        )
        buf = io.StringIO()
        model.write(buf)

        other = SinfoniettaCrush()
        other.read(io.StringIO(buf.getvalue()))

        assert other.params == model.params
        assert other.elastic.E == 1.5e8
        assert other.z == model.z
        assert other.bfunc.yinf == 0.05

    def test_elastic_roundtrip(self):
        buf = io.StringIO()
        LinearElastic(young=1e7, poisson=0.3).write(buf)
        other = LinearElastic()
        other.read(io.StringIO(buf.getvalue()))
        assert other.get_young() == 1e7
        assert other.get_poisson() == 0.3

    def test_truncated_stream(self):
        model = SinfoniettaCrush()
        with pytest.raises(ParameterStreamError) as exc_info:
            model.read(io.StringIO("SinfoniettaCrush 2e8 0.2 3"))
        assert exc_info.value.field == 'beta_p'
        assert exc_info.value.token is None

    def test_malformed_value(self):
        with pytest.raises(ParameterStreamError) as exc_info:
            SinfoniettaCrush().read(io.StringIO("SinfoniettaCrush 2e8 abc"))
        assert exc_info.value.field == 'poisson'
        assert 'abc' in str(exc_info.value)

    def test_wrong_model_name(self):
        with pytest.raises(ParameterStreamError) as exc_info:
            LinearElastic().read(io.StringIO("SinfoniettaCrush 2e8 0.2"))
        assert exc_info.value.field == 'model name'

    def test_out_of_range_value_in_stream(self):
        with pytest.raises(MaterialParameterError) as exc_info:
            LinearElastic().read(io.StringIO("HookeElasticity 2e8 0.7"))
        assert exc_info.value.field == 'poisson'

    def test_failed_read_keeps_parameters(self):
        model = SinfoniettaCrush(pc0=3e5)
        with pytest.raises(ParameterStreamError):
            model.read(io.StringIO("SinfoniettaCrush 1e8 0.3"))
        assert model.params.pc0 == 3e5
        assert model.get_young() == 200e6


class TestMaterialFactory:
    """测试材料工厂"""

    def test_registered_names(self):
        assert MaterialFactory.registered_names() == (
            'HookeElasticity', 'SinfoniettaClassica', 'SinfoniettaCrush'
        )

    def test_subclass_registry_is_separate(self):
        """子类上注册的模型不出现在基类注册表中"""

        class LabFactory(MaterialFactory):
            pass

        @LabFactory.register
        class DummyElastic(LinearElastic):
            REGISTRATION_NAME = 'DummyElastic'

        assert 'DummyElastic' in LabFactory.registered_names()
        assert 'SinfoniettaCrush' in LabFactory.registered_names()
        assert 'DummyElastic' not in MaterialFactory.registered_names()
        assert isinstance(LabFactory.read(io.StringIO("DummyElastic 1e7 0.3")), DummyElastic)

    def test_create(self):
        mat = MaterialFactory.create('Sand', {
            'model': 'SinfoniettaCrush',
            'young': 2e8,
            'poisson': 0.2,
            'pc0': 2e5,
        })
        assert isinstance(mat, SinfoniettaCrush)
        assert mat.params.pc0 == 2e5
        assert mat.get_registration_name() == 'SinfoniettaCrush'

    def test_create_missing_parameters(self):
        with pytest.raises(ValueError, match="missing required parameters"):
            MaterialFactory.create('Sand', {'model': 'SinfoniettaCrush', 'poisson': 0.2})

    def test_create_unknown_model(self):
        with pytest.raises(ValueError, match="Unknown constitutive model"):
            MaterialFactory.create('Steel', {'model': 'J2', 'young': 2e11, 'poisson': 0.3})

    def test_convenience_methods(self):
        assert isinstance(MaterialFactory.create_elastic(1e7, 0.3), LinearElastic)
        assert isinstance(MaterialFactory.create_classica(beta=2.0), SinfoniettaClassica)
        crush = MaterialFactory.create_crush(young=1e8, ginf=0.2)
        assert crush.params.ginf == 0.2

    def test_read_all(self):
        text = (
            "# two materials\n"
            "HookeElasticity 1e7 0.3\n"
            "SinfoniettaCrush 2e8 0.2 3 1e-6 0 30 1e5 0.4 0.1 0.01 0.001  # sand\n"
        )
        models = MaterialFactory.read_all(io.StringIO(text))
        assert [type(m) for m in models] == [LinearElastic, SinfoniettaCrush]
        assert models[0].get_young() == 1e7
        assert models[1].params == CrushParameters()

    def test_read_unknown_model(self):
        with pytest.raises(ParameterStreamError) as exc_info:
            MaterialFactory.read(io.StringIO("Granite 1 2 3"))
        assert exc_info.value.token == 'Granite'


class TestWaveSpeed:

    def test_p_wave_speed(self):
        model = SinfoniettaCrush(young=200e6, poisson=0.2)
        M = 200e6 * 0.8 / (1.2 * 0.6)
        assert np.isclose(model.p_wave_modulus(), M)
        assert np.isclose(model.wave_speed(2000.0), np.sqrt(M / 2000.0))

    def test_invalid_density(self):
        with pytest.raises(ValueError):
            LinearElastic().wave_speed(0.0)


class TestMaterialPoint:

    def test_copy_is_independent(self):
        point = MaterialPoint(pc=1e5, phi_star=0.4)
        saved = point.copy()
        point.stress[0] = -1.0
        point.pc = 2e5
        assert saved.stress[0] == 0.0
        assert saved.pc == 1e5

    def test_assign_copies_arrays(self):
        point = MaterialPoint()
        other = MaterialPoint(stress=np.ones(6), pc=3.0)
        point.assign(other)
        other.stress[0] = 5.0
        assert point.pc == 3.0
        assert np.all(point.stress == 1.0)

    def test_shape_check(self):
        with pytest.raises(ValueError):
            MaterialPoint(stress=np.zeros(3))

    def test_plastic_volumetric_strain(self):
        point = MaterialPoint(plastic_strain=[-0.01, -0.01, -0.01, 0.002, 0, 0])
        assert np.isclose(point.plastic_volumetric_strain, 0.03)

    def test_tensor_views(self):
        point = MaterialPoint(stress=[-1.0, -2.0, -3.0, 0.4, 0.5, 0.6],
                              plastic_strain=[0.0, 0.0, 0.0, 0.2, 0.0, 0.0])
        assert point.stress_tensor[1, 2] == 0.4
        assert point.stress_tensor[0, 1] == 0.6
        assert np.isclose(point.plastic_strain_tensor[1, 2], 0.1)
        assert np.isclose(point.mean_pressure, 2.0)

    def test_reset(self):
        point = MaterialPoint(stress=np.ones(6), pc=1e5, phi_star=0.4, is_plastic=True)
        point.reset()
        assert np.all(point.stress == 0.0)
        assert point.pc == 0.0
        assert point.phi_star == 0.0
        assert not point.is_plastic


class TestLinearElastic:

    def test_update(self):
        model = LinearElastic(young=200e6, poisson=0.2)
        point = MaterialPoint()
        model.init(point)
        d_eps = np.array([[1e-4, 2e-5, 0], [2e-5, -3e-5, 0], [0, 0, 0]])
        cloud = PointCloud([point])
        cloud.set_strain_increment(0, d_eps)

        result = model.update_strain_and_stress(cloud, 0)

        expected = model.elastic.D @ tensor_to_voigt(d_eps)
        assert np.allclose(result.stress, expected)
        assert np.allclose(point.stress, expected)
        assert not result.is_plastic
        assert np.allclose(result.tangent, model.elastic.D)


class TestSinfoniettaInit:
    """测试物质点初始化"""

    def test_init_virgin_point(self):
        model = SinfoniettaCrush(pc0=1.5e5, phi_star0=0.35)
        point = MaterialPoint(plastic_strain=np.ones(6), delta_lambda=1.0, is_plastic=True)
        model.init(point)
        assert point.pc == 1.5e5
        assert point.phi_star == 0.35
        assert np.all(point.plastic_strain == 0.0)
        assert point.delta_lambda == 0.0
        assert not point.is_plastic

    def test_init_normally_consolidated(self):
        """初始应力在初始屈服面外时 pc 提高到屈服面上"""
        model = SinfoniettaCrush(pc0=1e5)
        sigma = -2e5 * np.eye(3)
        sigma[0, 1] = sigma[1, 0] = 4e4
        point = MaterialPoint(stress=tensor_to_stress(sigma))
        model.init(point)

        assert point.pc > 2e5
        assert np.isclose(model.yield_value(point), 0.0, atol=1e-12)

    def test_init_inside_keeps_pc0(self):
        model = SinfoniettaCrush(pc0=1e5)
        point = MaterialPoint(stress=tensor_to_stress(-5e4 * np.eye(3)))
        model.init(point)
        assert point.pc == 1e5

    def test_init_tensile_outside(self):
        model = SinfoniettaCrush()
        point = MaterialPoint(stress=np.array([1e5, 1e5, 1e5, 0, 0, 0]))
        with pytest.raises(MaterialParameterError) as exc_info:
            model.init(point)
        assert exc_info.value.field == 'stress'


class TestSinfoniettaUpdate:
    """测试单点应力更新"""

    def setup_method(self):
        self.model = SinfoniettaCrush(
            young=200e6, poisson=0.2, pc0=1e5,
            phi_star0=0.4, ginf=0.1, epv0=0.01, l0=0.001
        )
        self.point = MaterialPoint()
        self.model.init(self.point)
        self.cloud = PointCloud([self.point])

    def test_elastic_step(self):
        """试探应力在屈服面内: σ = σ_old + D Δε，内变量不变"""
        d_eps = -0.9e-4 * np.eye(3)
        d_eps[0, 1] = d_eps[1, 0] = 1e-5
        self.cloud.set_strain_increment(0, d_eps)

        result = self.model.update_strain_and_stress(self.cloud, 0)

        expected = self.model.elastic.D @ tensor_to_voigt(d_eps)
        assert not result.is_plastic
        assert np.allclose(self.point.stress, expected)
        assert self.point.pc == 1e5
        assert self.point.phi_star == 0.4
        assert np.all(self.point.plastic_strain == 0.0)
        assert result.state is self.point

    def test_antisymmetric_part_ignored(self):
        d_sym = -1e-5 * np.eye(3)
        d_sym[0, 1] = d_sym[1, 0] = 1e-6
        d_full = d_sym.copy()
        d_full[0, 1] += 3e-6
        d_full[1, 0] -= 3e-6

        other = MaterialPoint()
        self.model.init(other)
        cloud = PointCloud([self.point, other])
        cloud.set_strain_increment(0, d_sym)
        cloud.set_strain_increment(1, d_full)
        r0, r1 = cloud.update_all(self.model)
        assert np.allclose(r0.stress, r1.stress)

    def test_plastic_step(self):
        self.cloud.set_strain_increment(0, -1e-3 * np.eye(3))
        result = self.model.update_strain_and_stress(self.cloud, 0)

        assert result.is_plastic
        assert result.delta_lambda > 0.0
        assert abs(self.model.yield_value(self.point)) < 1e-8
        assert self.point.pc > 1e5
        assert self.point.plastic_volumetric_strain > 0.0
        assert self.point.is_plastic
        assert self.point.delta_lambda == result.delta_lambda

    def test_zero_increment_is_idempotent(self):
        self.cloud.set_strain_increment(0, -1e-3 * np.eye(3))
        self.model.update_strain_and_stress(self.cloud, 0)
        saved = self.point.copy()

        self.cloud.set_strain_increment(0, np.zeros((3, 3)))
        result = self.model.update_strain_and_stress(self.cloud, 0)

        assert not result.is_plastic
        assert np.array_equal(self.point.stress, saved.stress)
        assert np.array_equal(self.point.plastic_strain, saved.plastic_strain)
        assert self.point.pc == saved.pc
        assert self.point.phi_star == saved.phi_star

    def test_isotropic_crushing(self):
        """等压加载: pc 增大，φ* 单调减小到平台 ginf"""
        history = _quiet_driver(self.model, point=self.point).run(isotropic_path(0.03, 30))

        pcs = np.array([rec['pc'] for rec in history])
        phis = np.array([rec['phi_star'] for rec in history])

        assert all(rec['is_plastic'] for rec in history)
        assert all(abs(rec['yield_value']) < 1e-8 for rec in history)
        assert np.all(np.diff(pcs) >= 0.0)
        assert pcs[-1] > 1e5
        assert phis[0] == 0.4
        assert np.all(np.diff(phis) <= 0.0)
        assert np.isclose(phis[-1], 0.1, atol=1e-6)
        for rec in history:
            assert np.isclose(rec['phi_star'], self.model.bfunc(rec['epv']))

    def test_crushing_increases_hardening(self):
        """与无破碎模型相比，相同路径下 pc 增长更快"""
        crush = _quiet_driver(self.model).run(isotropic_path(0.03, 30))
        classica = _quiet_driver(SinfoniettaClassica(pc0=1e5)).run(isotropic_path(0.03, 30))
        assert crush[-1]['pc'] > classica[-1]['pc']
        # Classica 不跟踪孔隙率
        assert classica[-1]['phi_star'] == 0.0

    def test_isotropic_compression_beta_zero(self):
        """beta = 0 时等压加载仍在屈服面上压密硬化"""
        model = SinfoniettaCrush(beta=0.0, pc0=1e5)
        history = _quiet_driver(model).run(isotropic_path(0.01, 10))

        assert all(rec['is_plastic'] for rec in history)
        assert all(abs(rec['yield_value']) < 1e-8 for rec in history)
        pcs = np.array([rec['pc'] for rec in history])
        assert np.all(np.diff(pcs) >= 0.0)
        assert pcs[-1] > 1e5

    def test_return_mapping_failure(self):
        """迭代上限内未收敛时报告物质点索引，状态保持不变"""
        model = SinfoniettaCrush(max_iter=1)
        points = [MaterialPoint(), MaterialPoint()]
        cloud = PointCloud(points)
        cloud.init_all(model)
        cloud.set_strain_increment(1, -2e-3 * np.eye(3))
        saved = points[1].copy()

        with pytest.raises(ReturnMappingError) as exc_info:
            model.update_strain_and_stress(cloud, 1)

        err = exc_info.value
        assert err.point_index == 1
        assert err.iterations == 1
        assert err.residual > model.yield_tol
        assert "point 1" in str(err)
        assert np.array_equal(points[1].stress, saved.stress)
        assert np.array_equal(points[1].plastic_strain, saved.plastic_strain)
        assert points[1].pc == saved.pc
        assert points[1].phi_star == saved.phi_star


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
