"""
Worked example: regression, mediation and moderation on one dataset
Synthetic training-study data (hours of practice, motivation, score)

Demonstrates:
- Building a ``Dataset`` from a pandas DataFrame
- Storing and reloading it through ``SqlDatasetRepository``
- ``linear_regression``, ``mediation_analysis`` and
  ``moderation_analysis`` with their printed tables
- Editing cells from text with ``parse_cell``
"""

import numpy as np
import pandas as pd

from regression_analyzer import (
    SqlDatasetRepository,
    dataset_from_frame,
    linear_regression,
    mediation_analysis,
    moderation_analysis,
    parse_cell,
    print_mediation_table,
    print_moderation_table,
    print_regression_table,
)

# ============================================================================
# Build data
# ============================================================================

rng = np.random.default_rng(2024)
n = 250
hours = rng.uniform(0, 10, n)
motivation = 2.0 + 0.4 * hours + rng.standard_normal(n)
support = rng.standard_normal(n)
score = (
    40.0
    + 1.5 * hours
    + 3.0 * motivation
    + 0.8 * hours * support
    + rng.standard_normal(n) * 2.0
)
frame = pd.DataFrame(
    {
        "hours": hours,
        "motivation": motivation,
        "support": support,
        "score": score,
        "cohort": rng.choice(["spring", "autumn"], n),
    }
)

dataset = dataset_from_frame(frame, name="training study")
print(dataset)

# ============================================================================
# Store and reload
# ============================================================================

repo = SqlDatasetRepository("sqlite://")
repo.initialize()
dataset_id = repo.save(dataset)
dataset = repo.load(dataset_id)
print(f"Stored datasets: {repo.list_datasets()}")

# ============================================================================
# Simple regression
# ============================================================================

regression = linear_regression(dataset, "score", ["hours", "motivation"])
print_regression_table(regression, title="score ~ hours + motivation")
assert regression.r_squared > 0.8

# ============================================================================
# Mediation: hours -> motivation -> score
# ============================================================================

mediation = mediation_analysis(dataset, "hours", "motivation", "score")
print_mediation_table(mediation)
print(f"c = {mediation.total_effect:.4f}, c' + ab = {mediation.total_effect_check:.4f}")

# ============================================================================
# Moderation: does support change the hours -> score slope?
# ============================================================================

moderation = moderation_analysis(dataset, "hours", "support", "score")
print_moderation_table(moderation)
assert "hours*support" not in dataset

centred = moderation_analysis(dataset, "hours", "support", "score", center=True)
print_moderation_table(centred, title="Moderation Analysis (mean-centred)")

# ============================================================================
# Editing a cell from text
# ============================================================================

variable = dataset.get_variable("score")
dataset.set_value(0, "score", parse_cell("", variable.type))
try:
    linear_regression(dataset, "score", ["hours"])
except ValueError as exc:
    print(f"Expected failure after blanking a cell: {exc}")
