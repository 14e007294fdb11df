# Default tolerance used by knot removal to decide whether the reduced
# representation still reproduces the geometry. Relative to 1 + max |P|.
KNOT_REMOVAL_TOL = 1e-10

# Floor of the removal bound, in machine epsilons of the largest homogeneous
# control point. Below it, deviations are indistinguishable from round-off.
KNOT_REMOVAL_ROUNDOFF = 1e3

# How the derivative of a rational basis is computed by default.
# "renormalized": dN_i w_i / sum_j(dN_j w_j), same weighting as for positions.
# "quotient": exact first derivative of N_i w_i / sum_j(N_j w_j).
RATIONAL_DERIVATIVE = "renormalized"

RATIONAL_DERIVATIVE_MODES = ("renormalized", "quotient")
