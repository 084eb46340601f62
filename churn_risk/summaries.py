"""
Structured summaries for the rendering layer.

Everything here returns plain data (dicts, DataFrames). No drawing.
"""

import json

import pandas as pd

from .dataset import churn_label
from .evaluator import EvaluationReport
from .records import REQUIRED_COLUMNS, CustomerRecord

MISSING_MARKERS = {"", "NA"}

# Illustrative weights for display, not learned from the model
FEATURE_IMPORTANCE = {
    "tenure": 0.22,
    "monthlyCharges": 0.18,
    "totalCharges": 0.12,
    "contractCode": 0.20,
    "onlineSecurityFlag": 0.08,
    "techSupportFlag": 0.09,
    "internetServiceFlag": 0.06,
    "tenureYears": 0.05,
}

# ROI estimate assumptions
TYPICAL_CHURN_RATE = 0.27
RETENTION_IMPROVEMENT = 0.20

EXCELLENT_ACCURACY = 0.93
GOOD_ACCURACY = 0.85
HIGH_RECALL = 0.80


def data_quality(records: list[CustomerRecord]) -> dict:
    """
    Row/column counts, missing values and duplicate rows.

    A value is missing if absent, empty or "NA". ``missing_columns`` lists
    required input columns that no row carries.
    """
    rows = [r.to_mapping() for r in records]
    total_rows = len(rows)
    columns = list(dict.fromkeys(col for row in rows for col in row))

    missing_by_column = {
        col: sum(1 for row in rows if (row.get(col) or "").strip() in MISSING_MARKERS)
        for col in columns
    }
    missing = sum(missing_by_column.values())
    total_cells = total_rows * len(columns)

    unique_rows = {json.dumps(row, sort_keys=True) for row in rows}

    return {
        "total_rows": total_rows,
        "total_columns": len(columns),
        "missing_count": missing,
        "missing_percent": round(missing / total_cells * 100, 2) if total_cells else 0.0,
        "duplicate_count": total_rows - len(unique_rows),
        "missing_by_column": missing_by_column,
        "missing_columns": [col for col in REQUIRED_COLUMNS if col not in columns],
    }


def churn_distribution(records: list[CustomerRecord]) -> dict:
    """Churned vs retained counts and churn rate (percent)."""
    churned = sum(churn_label(r.churn) for r in records)
    total = len(records)
    return {
        "churned": churned,
        "retained": total - churned,
        "churn_rate": round(churned / total * 100, 2) if total else 0.0,
    }


def feature_importance() -> pd.DataFrame:
    """Illustrative feature weights as percentages, largest first."""
    total = sum(FEATURE_IMPORTANCE.values())
    df = pd.DataFrame(
        {
            "feature": list(FEATURE_IMPORTANCE),
            "importance": list(FEATURE_IMPORTANCE.values()),
        }
    )
    df["percentage"] = df["importance"] / total * 100
    return df.sort_values("percentage", ascending=False).reset_index(drop=True)


def actionable_insights(report: EvaluationReport, n_customers: int) -> list[dict]:
    """
    Business readings of an evaluation.

    Returns:
        List of {"title", "text"} items
    """
    insights = []

    if report.accuracy >= EXCELLENT_ACCURACY:
        insights.append({
            "title": "Excellent model performance",
            "text": f"Accuracy {report.accuracy:.2%} meets the 93-95% target.",
        })
    elif report.accuracy >= GOOD_ACCURACY:
        insights.append({
            "title": "Good model performance",
            "text": (
                f"Accuracy {report.accuracy:.2%}. More data or feature "
                "engineering may reach the 93-95% target."
            ),
        })
    else:
        insights.append({
            "title": "Model needs improvement",
            "text": (
                f"Accuracy {report.accuracy:.2%}. Add training data, add "
                "features or tune hyperparameters."
            ),
        })

    insights.append({
        "title": "Precision",
        "text": (
            f"When the model predicts churn it is correct {report.precision:.2%} "
            f"of the time ({report.precision * 100:.0f} of 100 flagged customers)."
        ),
    })

    recall_note = (
        "Most at-risk customers are identified before they leave."
        if report.recall >= HIGH_RECALL
        else "Consider lowering the decision threshold to catch more churners."
    )
    insights.append({
        "title": "Recall",
        "text": f"The model catches {report.recall:.2%} of churners. {recall_note}",
    })

    expected_churners = round(n_customers * TYPICAL_CHURN_RATE)
    saved = round(expected_churners * report.recall * RETENTION_IMPROVEMENT)
    insights.append({
        "title": "Estimated ROI",
        "text": (
            f"With {n_customers} customers, targeted interventions could retain "
            f"about {saved} customers who would otherwise churn."
        ),
        "saved_customers": saved,
    })
    return insights
