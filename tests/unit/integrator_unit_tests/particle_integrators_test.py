# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Unit tests for Verlet, Beeman and Gear-5 particle integrators

Tests cover:
1. Bootstrap histories
2. First-step formulas checked by hand
3. Free motion (no forces)
4. Accuracy against the analytical solution
5. Convergence with decreasing time step
6. Statistics and reset
7. Factory function
"""

import numpy as np
import pytest

from oscsym.exceptions import ConfigurationError
from oscsym.systems.base.numerical_integration.fixed_step_integrators import (
    BeemanHistory,
    BeemanIntegrator,
    Gear5Integrator,
    GearHistory,
    VerletHistory,
    VerletIntegrator,
    create_fixed_step_integrator,
)
from oscsym.systems.base.numerical_integration.method_registry import IntegrationMethod
from oscsym.systems.base.particle import Particle
from oscsym.systems.builtin.damped_oscillator import DampedOscillator
from oscsym.types.core import Vector2D

ALL_INTEGRATORS = [VerletIntegrator, BeemanIntegrator, Gear5Integrator]


# ============================================================================
# Helpers
# ============================================================================


def make_system(integrator, k=1.0, gamma=0.0, dt=0.25, total=10.0, x0=1.0, v0=0.0, mass=1.0):
    """Oscillator whose initial acceleration matches the force model"""
    a0 = -(k * x0 + gamma * v0) / mass
    particle = Particle(mass, Vector2D(x0, 0.0), Vector2D(v0, 0.0), Vector2D(a0, 0.0))
    return DampedOscillator(particle, k, gamma, dt, total, integrator)


def run_positions(system):
    positions = []
    while not system.is_finished():
        system.advance()
        positions.append(system.particle.position.x)
    return np.array(positions)


# ============================================================================
# Test Class 1: Verlet
# ============================================================================


class TestVerlet:
    """Test Verlet integrator"""

    def test_metadata(self):
        integrator = VerletIntegrator()
        assert integrator.name == "Verlet"
        assert integrator.order == 2
        assert integrator.method is IntegrationMethod.VERLET
        assert not integrator.is_initialized

    def test_bootstrap_history(self):
        """x_{-1} = x0 - v_{-1}·dt + F0·dt²/(2m), v_{-1} = v0 - F0·dt/m"""
        integrator = VerletIntegrator()
        system = make_system(integrator, dt=0.25)
        history = integrator.bootstrap(system.particle.output_state(), system)
        assert isinstance(history, VerletHistory)
        # F0 = -1, v_{-1} = 0.25, x_{-1} = 1 - 0.0625 - 0.03125
        assert history.previous_position.x == pytest.approx(0.90625)
        assert history.previous_position.y == 0.0

    def test_first_step_formulas(self):
        """Hand-computed first step, undamped"""
        integrator = VerletIntegrator()
        system = make_system(integrator, dt=0.25)
        system.advance()
        # x1 = 2·1 - 0.90625 - 1·0.0625
        assert system.particle.position.x == pytest.approx(1.03125)
        # α = 1, β = 4 - 0.125; v1 = x1·β - x0/dt
        assert system.particle.velocity.x == pytest.approx(1.03125 * 3.875 - 4.0)
        # a1 = F(x1, v1)/m
        assert system.particle.acceleration.x == pytest.approx(-1.03125)
        assert integrator.history.previous_position.x == 1.0

    def test_damped_velocity_solve(self):
        """α, β include damping and stiffness"""
        integrator = VerletIntegrator()
        system = make_system(integrator, k=2.0, gamma=1.0, dt=0.5, total=5.0, mass=2.0)
        state = system.particle.output_state()
        history = integrator.bootstrap(state, system)
        new_state, _ = integrator.step(state, history, system)
        alpha = 1.0 + 1.0 * 0.5 / 4.0
        beta = 2.0 - 2.0 * 0.5 / 4.0
        expected_v = new_state.position.x * (beta / alpha) - 1.0 / (alpha * 0.5)
        assert new_state.velocity.x == pytest.approx(expected_v)

    def test_force_evaluations(self):
        """1 on bootstrap, then 2 per step"""
        integrator = VerletIntegrator()
        system = make_system(integrator)
        for _ in range(5):
            system.advance()
        stats = integrator.get_stats()
        assert stats["total_steps"] == 5
        assert stats["total_fev"] == 1 + 2 * 5
        assert stats["bootstraps"] == 1


# ============================================================================
# Test Class 2: Beeman
# ============================================================================


class TestBeeman:
    """Test Beeman integrator"""

    def test_metadata(self):
        integrator = BeemanIntegrator()
        assert integrator.name == "Beeman"
        assert integrator.order == 3
        assert integrator.method is IntegrationMethod.BEEMAN

    def test_bootstrap_history(self):
        """a_{-1} = F(x_{-1}, v_{-1})/m from the backward Euler seed"""
        integrator = BeemanIntegrator()
        system = make_system(integrator, dt=0.25)
        history = integrator.bootstrap(system.particle.output_state(), system)
        assert isinstance(history, BeemanHistory)
        assert history.previous_acceleration.x == pytest.approx(-0.90625)

    def test_first_step_formulas(self):
        """Hand-computed first step, undamped"""
        integrator = BeemanIntegrator()
        system = make_system(integrator, dt=0.25)
        system.advance()
        dt = 0.25
        a0, a_prev = -1.0, -0.90625
        x1 = 1.0 + (2.0 / 3.0) * a0 * dt**2 - a_prev * dt**2 / 6.0
        a1 = -x1
        v1 = a1 * dt / 3.0 + (5.0 / 6.0) * a0 * dt - a_prev * dt / 6.0
        assert system.particle.position.x == pytest.approx(x1)
        assert system.particle.acceleration.x == pytest.approx(a1)
        assert system.particle.velocity.x == pytest.approx(v1)
        assert integrator.history.previous_acceleration.x == a0

    def test_acceleration_uses_predicted_velocity(self):
        """With damping, a_{n+1} depends on the predicted velocity"""
        integrator = BeemanIntegrator()
        system = make_system(integrator, k=1.0, gamma=2.0, dt=0.25)
        state = system.particle.output_state()
        history = integrator.bootstrap(state, system)
        new_state, _ = integrator.step(state, history, system)
        dt = 0.25
        a0 = state.acceleration.x
        a_prev = history.previous_acceleration.x
        predicted_v = state.velocity.x + 1.5 * a0 * dt - 0.5 * a_prev * dt
        expected = -(new_state.position.x + 2.0 * predicted_v)
        assert new_state.acceleration.x == pytest.approx(expected)

    def test_force_evaluations(self):
        """2 on bootstrap, then 1 per step"""
        integrator = BeemanIntegrator()
        system = make_system(integrator)
        for _ in range(4):
            system.advance()
        assert integrator.get_stats()["total_fev"] == 2 + 4


# ============================================================================
# Test Class 3: Gear
# ============================================================================


class TestGear:
    """Test Gear 5th-order predictor-corrector"""

    def test_metadata(self):
        integrator = Gear5Integrator()
        assert integrator.name == "Gear Predictor-Corrector (5th order)"
        assert integrator.order == 6
        assert integrator.method is IntegrationMethod.GEAR

    def test_bootstrap_seeds_known_derivatives(self):
        """r0..r2 from the particle, r3..r5 zero"""
        integrator = Gear5Integrator()
        system = make_system(integrator, x0=2.0, v0=0.5)
        history = integrator.bootstrap(system.particle.output_state(), system)
        assert isinstance(history, GearHistory)
        assert len(history.derivatives) == 6
        assert history.derivatives[0] == Vector2D(2.0, 0.0)
        assert history.derivatives[1] == Vector2D(0.5, 0.0)
        assert history.derivatives[2] == Vector2D(-2.0, 0.0)
        assert all(d == Vector2D.ZERO for d in history.derivatives[3:])
        assert integrator.get_stats()["total_fev"] == 0

    def test_corrector_coefficients(self):
        c = Gear5Integrator.corrector_coefficients(0.5)
        assert c[0] == pytest.approx(3.0 / 16.0)
        assert c[1] == pytest.approx(251.0 / 360.0 / 0.5)
        assert c[2] == pytest.approx(2.0 / 0.25)
        assert c[3] == pytest.approx(11.0 / 18.0 * 6.0 / 0.125)
        assert c[4] == pytest.approx(24.0 / 6.0 / 0.0625)
        assert c[5] == pytest.approx(120.0 / 60.0 / 0.03125)

    def test_first_step_formulas(self):
        """Hand-computed first step from (x, v, a) = (1, 0, -1)"""
        integrator = Gear5Integrator()
        system = make_system(integrator, dt=0.25)
        system.advance()
        dt = 0.25
        p0 = 1.0 - 0.5 * dt**2
        p1 = -dt
        p2 = -1.0
        a = -p0
        delta = (a - p2) * dt**2 / 2.0
        assert system.particle.position.x == pytest.approx(p0 + 3.0 / 16.0 * delta)
        assert system.particle.velocity.x == pytest.approx(p1 + 251.0 / 360.0 / dt * delta)
        assert system.particle.acceleration.x == pytest.approx(p2 + 2.0 / dt**2 * delta)
        # Acceleration after the correction equals the evaluated force
        assert system.particle.acceleration.x == pytest.approx(a)

    def test_free_motion_exact(self):
        """k = γ = 0 reproduces x0 + v0·t for many steps"""
        particle = Particle(1.0, Vector2D(1.0, -2.0), Vector2D(0.5, 0.25), Vector2D.ZERO)
        system = DampedOscillator(particle, 0.0, 0.0, 0.01, 2.0, "GEAR")
        for n in range(1, 201):
            system.advance()
            t = n * 0.01
            assert system.particle.position.x == pytest.approx(1.0 + 0.5 * t, abs=1e-12)
            assert system.particle.position.y == pytest.approx(-2.0 + 0.25 * t, abs=1e-12)
            assert system.particle.velocity == Vector2D(0.5, 0.25)
            assert system.particle.acceleration == Vector2D.ZERO

    def test_one_force_evaluation_per_step(self):
        integrator = Gear5Integrator()
        system = make_system(integrator)
        for _ in range(7):
            system.advance()
        stats = integrator.get_stats()
        assert stats["total_fev"] == 7
        assert stats["avg_fev_per_step"] == pytest.approx(1.0)


# ============================================================================
# Test Class 4: Common Behaviour
# ============================================================================


class TestAllIntegrators:
    """Properties every scheme must satisfy"""

    @pytest.mark.parametrize("cls", ALL_INTEGRATORS)
    def test_free_motion(self, cls):
        """No force: constant velocity"""
        particle = Particle(1.0, Vector2D(0.0, 0.0), Vector2D(1.0, 0.0), Vector2D.ZERO)
        system = DampedOscillator(particle, 0.0, 0.0, 0.01, 1.0, cls())
        for _ in range(100):
            system.advance()
        assert system.particle.position.x == pytest.approx(1.0, abs=1e-10)
        assert system.particle.velocity.x == pytest.approx(1.0, abs=1e-10)

    @pytest.mark.parametrize("cls", ALL_INTEGRATORS)
    def test_y_component_stays_zero(self, cls):
        system = make_system(cls(), gamma=0.3, dt=0.01, total=1.0)
        run_positions(system)
        assert system.particle.position.y == 0.0
        assert system.particle.velocity.y == 0.0

    @pytest.mark.parametrize("cls", ALL_INTEGRATORS)
    def test_accuracy_against_analytical(self, cls):
        """Underdamped motion tracked to within a few 1e-4"""
        system = make_system(cls(), k=4.0, gamma=0.5, dt=0.001, total=5.0)
        t = system.time_step * np.arange(1, 5001)
        positions = run_positions(system)
        exact, _ = system.analytical_solution(t)
        assert np.max(np.abs(positions - exact)) < 5e-3

    @pytest.mark.parametrize("cls", ALL_INTEGRATORS)
    def test_error_decreases_with_time_step(self, cls):
        errors = []
        for dt in (0.01, 0.001):
            system = make_system(cls(), k=1.0, gamma=0.2, dt=dt, total=2.0)
            run_positions(system)
            exact, _ = system.analytical_solution(system.elapsed_time)
            errors.append(abs(system.particle.position.x - float(exact)))
        assert errors[1] < errors[0]

    @pytest.mark.parametrize("cls", ALL_INTEGRATORS)
    def test_reset(self, cls):
        integrator = cls()
        system = make_system(integrator)
        system.advance()
        assert integrator.is_initialized
        integrator.reset()
        assert not integrator.is_initialized
        assert integrator.history is None
        assert integrator.get_stats()["total_steps"] == 0

    @pytest.mark.parametrize("cls", ALL_INTEGRATORS)
    def test_str_and_repr(self, cls):
        integrator = cls()
        assert str(integrator) == f"{integrator.name} (order {integrator.order})"
        assert "initialized=False" in repr(integrator)


# ============================================================================
# Test Class 5: Factory Function
# ============================================================================


class TestCreateFixedStepIntegrator:
    @pytest.mark.parametrize(
        "tag, cls",
        [
            ("verlet", VerletIntegrator),
            ("BEEMAN", BeemanIntegrator),
            ("gear5", Gear5Integrator),
            (IntegrationMethod.GEAR, Gear5Integrator),
        ],
    )
    def test_creates_instance(self, tag, cls):
        assert isinstance(create_fixed_step_integrator(tag), cls)

    def test_fresh_instance_each_call(self):
        assert create_fixed_step_integrator("verlet") is not create_fixed_step_integrator("verlet")

    def test_unknown(self):
        with pytest.raises(ConfigurationError):
            create_fixed_step_integrator("euler")
