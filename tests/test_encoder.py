"""
Tests for FeatureEncoder.

Encoding must be total: every record yields 8 finite values.
"""

import numpy as np
import pandas as pd
import pytest
from pandera.errors import SchemaError

from churn_risk.encoder import FeatureEncoder
from churn_risk.records import CustomerRecord
from churn_risk.schemas import FEATURE_FRAME_SCHEMA, FEATURE_NAMES


class TestEncodeRecord:
    """Tests for single-record encoding."""

    def test_full_record(self, encoder):
        record = CustomerRecord(
            tenure="24",
            monthly_charges="70.5",
            total_charges="1692",
            contract="One year",
            online_security="Yes",
            tech_support="No",
            internet_service="1",
        )
        vector = encoder.encode_record(record)
        assert vector.tolist() == [24.0, 70.5, 1692.0, 1.0, 1.0, 0.0, 1.0, 2.0]

    def test_empty_record_is_all_zero(self, encoder):
        vector = encoder.encode_record(CustomerRecord())
        assert vector.shape == (8,)
        assert vector.tolist() == [0.0] * 8

    def test_malformed_record(self, encoder, edge_customers):
        vector = encoder.encode_record(edge_customers[2])
        assert vector.shape == (8,)
        assert np.isfinite(vector).all()
        assert vector.tolist() == [0.0] * 8

    def test_width(self, encoder):
        assert encoder.width == 8
        assert [c.feature for c in encoder.components] == FEATURE_NAMES

    def test_rewritten_record_reencodes(self, encoder):
        """Cleansing a field and re-encoding yields the new value."""
        record = CustomerRecord(tenure="abc", contract="Two year")
        cleaned = record.with_values(tenure="36")

        assert encoder.encode_record(record)[0] == 0.0
        vector = encoder.encode_record(cleaned)
        assert vector[0] == 36.0
        assert vector[7] == 3.0


class TestEncodeRecords:
    """Tests for batch encoding."""

    def test_frame_shape_and_columns(self, encoder, sample_records):
        frame = encoder.encode_records(sample_records)
        assert frame.shape == (100, 8)
        assert list(frame.columns) == FEATURE_NAMES

    def test_all_finite(self, encoder, sample_records, edge_customers):
        frame = encoder.encode_records(sample_records + edge_customers)
        assert np.isfinite(frame.to_numpy()).all()

    def test_matches_single_encoding(self, encoder, edge_customers):
        frame = encoder.encode_records(edge_customers)
        for i, record in enumerate(edge_customers):
            np.testing.assert_array_equal(frame.iloc[i].to_numpy(), encoder.encode_record(record))

    def test_tenure_years_consistent(self, encoder, sample_records):
        frame = encoder.encode_records(sample_records)
        np.testing.assert_allclose(frame["tenureYears"], frame["tenure"] / 12)

    def test_extras_ignored(self, encoder):
        record = CustomerRecord.from_mapping({"tenure": "5", "gender": "Female"})
        assert record.extras == {"gender": "Female"}
        assert encoder.encode_record(record)[0] == 5.0


class TestFeatureFrameSchema:
    """Tests for the encoded frame schema."""

    def test_rejects_nan(self):
        frame = pd.DataFrame({name: [0.0] for name in FEATURE_NAMES})
        frame.loc[0, "tenure"] = np.nan
        with pytest.raises(SchemaError):
            FEATURE_FRAME_SCHEMA.validate(frame)

    def test_rejects_bad_flag(self):
        frame = pd.DataFrame({name: [0.0] for name in FEATURE_NAMES})
        frame.loc[0, "techSupportFlag"] = 2.0
        with pytest.raises(SchemaError):
            FEATURE_FRAME_SCHEMA.validate(frame)

    def test_rejects_extra_column(self):
        frame = pd.DataFrame({name: [0.0] for name in FEATURE_NAMES + ["extra"]})
        with pytest.raises(SchemaError):
            FEATURE_FRAME_SCHEMA.validate(frame)
