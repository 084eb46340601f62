"""
Tests for min-max scaling.
"""

import numpy as np

from churn_risk.scaler import apply_scaler, fit_scaler, out_of_range_mask


class TestFitScaler:
    """Tests for fitting."""

    def test_min_max_per_feature(self):
        state = fit_scaler([[0, 10], [5, 20], [10, 30]])
        assert state.mins == (0.0, 10.0)
        assert state.maxs == (10.0, 30.0)
        assert state.n_samples == 3
        assert state.width == 2

    def test_min_never_exceeds_max(self, scaler_state):
        assert all(lo <= hi for lo, hi in zip(scaler_state.mins, scaler_state.maxs))

    def test_empty_corpus(self):
        state = fit_scaler([])
        assert state.n_samples == 0
        assert state.mins == (0.0,) * 8
        assert state.maxs == (0.0,) * 8

    def test_ranges(self):
        state = fit_scaler([[1, 2], [3, 4]])
        assert state.ranges == {0: {"min": 1.0, "max": 3.0}, 1: {"min": 2.0, "max": 4.0}}

    def test_fingerprint_tracks_corpus(self):
        a = fit_scaler([[0, 1], [2, 3]])
        b = fit_scaler([[0, 1], [2, 3]])
        c = fit_scaler([[0, 1], [5, 3]])
        assert a.fingerprint == b.fingerprint
        assert a.fingerprint != c.fingerprint

    def test_to_frame_uses_feature_names(self, scaler_state):
        frame = scaler_state.to_frame()
        assert list(frame.index)[0] == "tenure"
        assert list(frame.columns) == ["min", "max"]


class TestApplyScaler:
    """Tests for normalization."""

    def test_midpoint(self):
        state = fit_scaler([[0, 10], [10, 30]])
        np.testing.assert_allclose(apply_scaler([5, 20], state), [0.5, 0.5])

    def test_fitted_corpus_in_unit_interval(self, encoder, sample_records, scaler_state):
        raw = encoder.encode_records(sample_records).to_numpy()
        scaled = apply_scaler(raw, scaler_state)
        assert scaled.min() >= 0.0
        assert scaled.max() <= 1.0

    def test_constant_feature_is_zero(self):
        state = fit_scaler([[1, 7], [2, 7], [3, 7]])
        scaled = apply_scaler([[2, 7], [3, 9]], state)
        assert scaled[:, 1].tolist() == [0.0, 0.0]

    def test_no_clamping(self):
        state = fit_scaler([[0, 10], [10, 30]])
        np.testing.assert_allclose(apply_scaler([20, 0], state), [2.0, -0.5])

    def test_shape_preserved(self):
        state = fit_scaler([[0, 1], [1, 2]])
        assert apply_scaler([0.5, 1.5], state).shape == (2,)
        assert apply_scaler([[0.5, 1.5]], state).shape == (1, 2)

    def test_input_not_mutated(self):
        state = fit_scaler([[0, 10], [10, 30]])
        raw = np.array([[5.0, 20.0]])
        apply_scaler(raw, state)
        assert raw.tolist() == [[5.0, 20.0]]


class TestOutOfRangeMask:
    """Tests for detecting values outside the fitted range."""

    def test_flags_rows(self):
        state = fit_scaler([[0, 10], [10, 30]])
        mask = out_of_range_mask([[5, 20], [11, 20], [5, 9]], state)
        assert mask.tolist() == [False, True, True]

    def test_bounds_inclusive(self):
        state = fit_scaler([[0, 10], [10, 30]])
        assert out_of_range_mask([[0, 30]], state).tolist() == [False]
