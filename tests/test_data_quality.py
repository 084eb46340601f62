"""
Tests for data-quality summaries, ingestion and insights.
"""

import pytest

from churn_risk.errors import InputError, MalformedBatchFileError
from churn_risk.evaluator import ConfusionMatrix, EvaluationReport
from churn_risk.records import CustomerRecord, generate_sample_customers, records_to_frame
from churn_risk.summaries import (
    actionable_insights,
    churn_distribution,
    data_quality,
    feature_importance,
)
from pipeline.data import read_customers


def make_report(accuracy, recall=0.5, precision=0.5):
    return EvaluationReport(
        confusion=ConfusionMatrix(1, 1, 1, 1),
        accuracy=accuracy,
        precision=precision,
        recall=recall,
        specificity=0.5,
        f1=0.5,
        loss=0.4,
        n_samples=4,
    )


class TestSampleData:
    """Tests for the sample data generator."""

    def test_shape_and_ids(self, sample_frame):
        assert len(sample_frame) == 100
        assert sample_frame["customerID"].is_unique

    def test_reproducible(self):
        a = generate_sample_customers(n_customers=20, seed=1)
        b = generate_sample_customers(n_customers=20, seed=1)
        assert a.equals(b)

    def test_both_classes_present(self, sample_frame):
        assert set(sample_frame["Churn"]) == {"Yes", "No"}

    def test_records_round_trip_columns(self, sample_records):
        frame = records_to_frame(sample_records)
        assert frame.loc[0, "customerID"] == "CUST_0000"


class TestDataQuality:
    """Tests for the data-quality summary."""

    def test_counts(self):
        records = [
            CustomerRecord(customer_id="1", tenure="5", churn="Yes"),
            CustomerRecord(customer_id="2", tenure="NA", churn="No"),
            CustomerRecord(customer_id="2", tenure="NA", churn="No"),
        ]
        summary = data_quality(records)

        assert summary["total_rows"] == 3
        assert summary["total_columns"] == 3
        assert summary["missing_count"] == 2
        assert summary["missing_by_column"]["tenure"] == 2
        assert summary["duplicate_count"] == 1

    def test_columns_union_across_rows(self):
        records = [
            CustomerRecord(tenure="5"),
            CustomerRecord(contract="One year"),
        ]
        summary = data_quality(records)

        assert summary["total_columns"] == 2
        assert summary["missing_count"] == 2

    def test_missing_required_columns(self, sample_records):
        assert data_quality(sample_records)["missing_columns"] == []

        partial = data_quality([CustomerRecord(tenure="5", churn="No")])
        assert "MonthlyCharges" in partial["missing_columns"]
        assert "Contract" in partial["missing_columns"]
        assert "tenure" not in partial["missing_columns"]

    def test_empty(self):
        summary = data_quality([])
        assert summary["total_rows"] == 0
        assert summary["missing_percent"] == 0.0


class TestChurnDistribution:
    """Tests for class balance."""

    def test_distribution(self):
        records = [CustomerRecord(churn=v) for v in ["Yes", "No", "No", "1"]]
        assert churn_distribution(records) == {"churned": 2, "retained": 2, "churn_rate": 50.0}


class TestFeatureImportance:
    """Tests for the illustrative weights."""

    def test_sorted_percentages(self):
        df = feature_importance()
        assert len(df) == 8
        assert df["percentage"].sum() == pytest.approx(100.0)
        assert df["percentage"].is_monotonic_decreasing
        assert df.loc[0, "feature"] == "tenure"


class TestInsights:
    """Tests for business readings of an evaluation."""

    @pytest.mark.parametrize(
        "accuracy,title",
        [
            (0.95, "Excellent model performance"),
            (0.90, "Good model performance"),
            (0.60, "Model needs improvement"),
        ],
    )
    def test_accuracy_bands(self, accuracy, title):
        insights = actionable_insights(make_report(accuracy), 1000)
        assert insights[0]["title"] == title

    def test_roi(self):
        insights = actionable_insights(make_report(0.9, recall=0.5), 1000)
        roi = insights[-1]
        # 1000 x 0.27 = 270 churners, x 0.5 recall x 0.2 improvement = 27
        assert roi["saved_customers"] == 27

    def test_recall_note(self):
        high = actionable_insights(make_report(0.9, recall=0.85), 100)
        low = actionable_insights(make_report(0.9, recall=0.40), 100)
        assert "identified before they leave" in high[2]["text"]
        assert "lowering the decision threshold" in low[2]["text"]


class TestReadCustomers:
    """Tests for CSV ingestion."""

    def test_reads_strings(self, tmp_path, sample_frame):
        path = tmp_path / "customers.csv"
        sample_frame.to_csv(path, index=False)

        records = read_customers(path)

        assert len(records) == 100
        assert records[0].customer_id == "CUST_0000"
        assert isinstance(records[0].tenure, str)

    def test_blank_values_kept_as_empty(self, tmp_path):
        path = tmp_path / "customers.csv"
        path.write_text("tenure,TotalCharges,Churn\n5,,No\n")

        records = read_customers(path)
        assert records[0].total_charges == ""

    def test_header_only(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("tenure,MonthlyCharges\n")
        with pytest.raises(MalformedBatchFileError):
            read_customers(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "blank.csv"
        path.write_text("")
        with pytest.raises(MalformedBatchFileError):
            read_customers(path)

    def test_missing_file(self, tmp_path):
        path = tmp_path / "absent.csv"
        with pytest.raises(InputError, match="absent.csv"):
            read_customers(path)
