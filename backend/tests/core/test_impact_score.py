"""Impact score — weighted sum over optional signals; absent fields contribute 0."""

from portfolio.core.impact_score import (
    DEFAULT_WEIGHTS, ImpactWeights, compute_impact_score, count_advanced_technologies,
    technology_score,
)
from portfolio.core.record_types import Experience, Project
from tests.factories import make_experience, make_project


def _project(**overrides):
    return Project.model_validate(make_project(**overrides))


def test_bare_record_scores_zero():
    assert compute_impact_score(_project()) == 0


def test_featured_bonus():
    assert compute_impact_score(_project(featured=True)) == 150


def test_metric_base_plus_twice_improvement():
    metrics = [{"label": "Engagement", "value": "3x", "improvement": "+50%"}]
    assert compute_impact_score(_project(metrics=metrics)) == 120


def test_metric_without_improvement_counts_base_only():
    metrics = [{"label": "Engagement", "value": "3x"}]
    assert compute_impact_score(_project(metrics=metrics)) == 20


def test_business_impact_roi_and_cost_savings():
    impact = {"roi": "320%", "cost_savings": "$600K annually"}
    assert compute_impact_score(_project(business_impact=impact)) == 320 * 3 + 600 / 100


def test_capability_base_plus_accuracy():
    caps = [
        {"type": "nlp", "description": "Sentiment", "accuracy": 90},
        {"type": "automation", "description": "Routing"},
    ]
    assert compute_impact_score(_project(ai_capabilities=caps)) == 30 + 90 * 1.5 + 30


def test_advanced_technologies_counted_per_technology():
    techs = ["TensorFlow.js", "PyTorch", "React", "Computer Vision"]
    assert count_advanced_technologies(techs) == 3
    assert compute_impact_score(_project(technologies=techs)) == 75


def test_advanced_match_is_case_sensitive():
    assert count_advanced_technologies(["tensorflow", "nlp"]) == 0


def test_experience_scores_without_project_fields():
    exp = Experience.model_validate(make_experience(featured=True, technologies=["TensorFlow", "AWS"]))
    assert compute_impact_score(exp) == 150 + 25


def test_custom_weights_apply():
    weights = ImpactWeights(featured_bonus=10.0)
    assert compute_impact_score(_project(featured=True), weights) == 10
    assert DEFAULT_WEIGHTS.featured_bonus == 150.0


def test_technology_score_rewards_advanced_terms():
    assert technology_score(["Python", "Deep Learning", "NLP"]) == 3 + 2 * 3
    assert technology_score(None) == 0
