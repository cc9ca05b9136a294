"""
Tests for analysis utilities: relaxation time and root finding
"""

import pytest
import numpy as np


class TestRelaxationTime:
    """find_relaxation_time"""

    def test_log_interpolation(self):
        from memory_equations import find_relaxation_time

        tau = find_relaxation_time([1.0, 2.0, 3.0, 4.0], [1.0, 0.5, 0.3, 0.1])

        assert 2.0 < tau < 3.0
        expected = np.exp(np.log(3.0) + (np.exp(-1) - 0.3)
                          * (np.log(2.0) - np.log(3.0)) / (0.5 - 0.3))
        assert tau == pytest.approx(expected)

        print(f"✅ τ = {tau:.4f}")

    def test_linear_interpolation(self):
        from memory_equations import find_relaxation_time

        expected = 3.0 + (np.exp(-1) - 0.3) * (2.0 - 3.0) / (0.5 - 0.3)
        for mode in ("lin", "linear"):
            tau = find_relaxation_time([1.0, 2.0, 3.0, 4.0], [1.0, 0.5, 0.3, 0.1], mode=mode)
            assert tau == pytest.approx(expected)

    def test_normalized_by_first_sample(self):
        from memory_equations import find_relaxation_time

        t = [1.0, 2.0, 3.0, 4.0]
        F = np.array([1.0, 0.5, 0.3, 0.1])
        assert find_relaxation_time(t, 7.0 * F) == pytest.approx(find_relaxation_time(t, F))

    def test_never_decays(self):
        from memory_equations import find_relaxation_time

        assert find_relaxation_time([1.0, 2.0, 3.0], [1.0, 0.9, 0.8]) == np.inf

    def test_first_sample_below_threshold(self):
        from memory_equations import find_relaxation_time

        assert find_relaxation_time([1.0, 2.0, 3.0], [1.0, 0.9, 0.8], threshold=1.0) == 0.0

    def test_first_crossing_reported(self):
        from memory_equations import find_relaxation_time

        tau = find_relaxation_time([1.0, 2.0, 3.0, 4.0], [1.0, 0.2, 0.9, 0.1], mode="lin")
        assert 1.0 < tau < 2.0

    def test_mode_resolved(self):
        from memory_equations import find_relaxation_time

        t = [1.0, 2.0, 3.0]
        F = np.array([[1.0, 2.0], [0.5, 1.8], [0.2, 1.0]])
        tau = find_relaxation_time(t, F, mode="lin")

        assert tau.shape == (2,)
        expected = 3.0 + (np.exp(-1) - F[2] / F[0]) * (2.0 - 3.0) / (F[1] / F[0] - F[2] / F[0])
        np.testing.assert_allclose(tau, expected)

    def test_crossing_right_after_t0(self):
        from memory_equations import find_relaxation_time

        with np.errstate(divide="raise", invalid="raise"):
            tau = find_relaxation_time([0.0, 1.0, 2.0], [1.0, 0.2, 0.1])

        assert 0.0 < tau < 1.0
        assert tau == pytest.approx(1.0 + (np.exp(-1) - 0.2) * (0.0 - 1.0) / (1.0 - 0.2))

    def test_unknown_mode(self):
        from memory_equations import find_relaxation_time, ConfigurationError

        with pytest.raises(ConfigurationError):
            find_relaxation_time([1.0, 2.0], [1.0, 0.1], mode="cubic")

    def test_from_solver(self, zero_kernel, fast_solver):
        from memory_equations import MemoryEquation, solve, find_relaxation_time

        sol = solve(MemoryEquation(0.0, 1.0, 1.0, 0.0, 1.0, 0.0, zero_kernel), fast_solver)
        tau = find_relaxation_time(sol.t[1:], sol.F[1:])

        assert tau == pytest.approx(1.0, abs=1e-3)

        print("✅ τ(e^-t) = 1")

    def test_glass_never_relaxes(self, f2_kernel):
        from memory_equations import MemoryEquation, TimeDoublingSolver, solve
        from memory_equations import find_relaxation_time

        eq = MemoryEquation(0.0, 1.0, 1.0, 0.0, 1.0, 0.0, f2_kernel(5.0))
        sol = solve(eq, TimeDoublingSolver(N=64, dt=1e-3, t_max=1e3))

        assert find_relaxation_time(sol.t[1:], sol.F[1:]) == np.inf


class TestRegulaFalsi:
    """regula_falsi"""

    def test_linear(self):
        from memory_equations import regula_falsi

        calls = []

        def f(x):
            calls.append(x)
            return x - 1

        x = regula_falsi(0.0, 2.0, f)

        assert x == pytest.approx(1.0, abs=1e-10)
        assert len(calls) < 10

        print(f"✅ Root x=1 in {len(calls)} evaluations")

    def test_decreasing_function(self):
        from memory_equations import regula_falsi

        assert regula_falsi(0.0, 2.0, lambda x: 1 - x) == pytest.approx(1.0, abs=1e-10)

    def test_cubic(self):
        from memory_equations import regula_falsi

        x = regula_falsi(0.0, 2.0, lambda x: x**3 - 2)
        assert x == pytest.approx(2 ** (1 / 3), abs=1e-8)

    def test_root_outside_bracket(self):
        from memory_equations import regula_falsi

        x = regula_falsi(3.0, 5.0, lambda x: x**2 - 4)
        assert x == pytest.approx(2.0, abs=1e-6)

    def test_budget_returns_estimate(self):
        from memory_equations import regula_falsi

        x = regula_falsi(0.0, 2.0, lambda x: x**3 - 2, max_iterations=3)
        assert 0.0 < x < 2.0
