"""
Tests for the steady-state solver

For the schematic F2 kernel K = λF² (γ = 1, F0 = 1) the fixed point is

    f = 0                               λ < 4
    f = (1 + sqrt(1 - 4/λ)) / 2         λ ≥ 4
"""

import pytest
import numpy as np


def plateau(lam):
    return (1 + np.sqrt(1 - 4 / lam)) / 2


class TestScalarSteadyState:
    """Single-mode fixed point"""

    def test_glass_plateau(self, f2_kernel):
        from memory_equations import solve_steady_state

        result = solve_steady_state(1.0, 1.0, f2_kernel(5.0))

        assert result.F == pytest.approx(plateau(5.0), abs=1e-8)
        assert result.error <= 1e-10
        assert result.iterations > 1

        print(f"✅ f(λ=5) = {result.F:.6f}")

    def test_liquid(self, f2_kernel):
        from memory_equations import solve_steady_state

        result = solve_steady_state(1.0, 1.0, f2_kernel(2.0))
        assert abs(result.F) < 1e-8

    def test_fixed_point_residual(self, f2_kernel):
        from memory_equations import solve_steady_state

        kernel = f2_kernel(7.0)
        result = solve_steady_state(1.0, 1.0, kernel)

        K = kernel.evaluate(result.F, np.inf)
        assert abs(result.F - K / (K + 1.0)) < 1e-9
        assert result.K == pytest.approx(K, rel=1e-8)

    def test_kernel_called_at_infinity(self):
        from memory_equations import solve_steady_state

        times = []

        def kernel(F, t):
            times.append(t)
            return 5.0 * F**2

        solve_steady_state(1.0, 1.0, kernel)
        assert times and all(t == np.inf for t in times)

    @pytest.mark.slow
    def test_matches_long_time_limit(self, f2_kernel):
        from memory_equations import MemoryEquation, TimeDoublingSolver, solve
        from memory_equations import solve_steady_state

        lam = 6.0
        eq = MemoryEquation(0.0, 1.0, 1.0, 0.0, 1.0, 0.0, f2_kernel(lam))
        sol = solve(eq, TimeDoublingSolver(N=128, dt=1e-4, t_max=1e4))
        steady = solve_steady_state(1.0, 1.0, f2_kernel(lam))

        assert sol.F[-1] == pytest.approx(steady.F, abs=1e-3)

        print("✅ Time evolution ends at the steady state")

    def test_budget_exhausted(self, f2_kernel):
        from memory_equations import solve_steady_state, ConvergenceFailure

        with pytest.raises(ConvergenceFailure) as excinfo:
            solve_steady_state(1.0, 1.0, f2_kernel(5.0), max_iterations=2)

        assert excinfo.value.time == np.inf
        assert excinfo.value.iterations == 2
        assert "t=∞" in str(excinfo.value)


class TestModeResolvedSteadyState:
    """Vector and block families"""

    def test_vector(self, f2_kernel):
        from memory_equations import solve_steady_state

        lams = np.array([2.0, 5.0, 10.0])
        result = solve_steady_state(np.ones(3), np.ones(3), f2_kernel(lams))

        assert abs(result.F[0]) < 1e-8
        assert result.F[1] == pytest.approx(plateau(5.0), abs=1e-8)
        assert result.F[2] == pytest.approx(plateau(10.0), abs=1e-8)

    def test_block(self, block_f2_kernel):
        from memory_equations import solve_steady_state

        F0 = np.array([np.eye(2)] * 3)
        result = solve_steady_state(np.eye(2), F0, block_f2_kernel(5.0))

        assert result.F.shape == (3, 2, 2)
        np.testing.assert_allclose(result.F, plateau(5.0) * F0, atol=1e-8)

    def test_gamma_shape_checked(self, f2_kernel):
        from memory_equations import solve_steady_state, ShapeMismatch

        with pytest.raises(ShapeMismatch):
            solve_steady_state(np.ones(2), np.ones(3), f2_kernel(5.0))

    def test_verbose(self, f2_kernel, capsys):
        from memory_equations import solve_steady_state

        solve_steady_state(1.0, 1.0, f2_kernel(5.0), verbose=True)
        assert "Converged" in capsys.readouterr().out


class TestSteadyStateDetails:
    """Returned K, failures and exact element types"""

    def test_kernel_at_returned_value(self, f2_kernel):
        from memory_equations import solve_steady_state

        kernel = f2_kernel(7.0)
        result = solve_steady_state(1.0, 1.0, kernel)

        assert result.K == kernel.evaluate(result.F, np.inf)

    def test_non_finite_residual_fails_fast(self):
        from memory_equations import solve_steady_state, ConvergenceFailure

        with pytest.raises(ConvergenceFailure) as excinfo:
            solve_steady_state(1.0, 1.0, lambda F, t: F * np.nan)

        assert excinfo.value.iterations == 1
        assert excinfo.value.time == np.inf

    def test_exact_blocks(self):
        from fractions import Fraction
        from memory_equations import solve_steady_state

        one, zero = Fraction(1), Fraction(0)
        F0 = np.array([[[one, zero], [zero, one]]] * 3, dtype=object)
        result = solve_steady_state(1, F0, lambda F, t: F * 0 + Fraction(2))

        # (K + 1)⁻¹ K with K = [[2, 2], [2, 2]]
        expected = Fraction(2, 5)
        assert result.F.shape == (3, 2, 2)
        assert all(x == expected for x in result.F.ravel())
        assert all(isinstance(x, Fraction) for x in result.F.ravel())

        print("✅ Exact block fixed point 2/5")
