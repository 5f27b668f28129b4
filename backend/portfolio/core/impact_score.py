"""Impact Score — weighted ranking heuristic over optional record signals.

Invariants:
    - compute_impact_score is total: any record (Project, Experience, partial) scores
    - Every absent optional field contributes exactly 0
    - Numeric text goes through parse_metric_number only

Design Decisions:
    - Weights live in a frozen ImpactWeights: product-tuning values, overridable from settings
    - Signals read with getattr defaults so Experience records (no metrics,
      no capabilities) share the same scorer
    - Advanced-technology matching is a case-sensitive substring test per technology;
      each matching technology counts once
"""

from dataclasses import dataclass

from portfolio.core.metric_values import parse_metric_number

ADVANCED_TECHNOLOGIES: tuple[str, ...] = (
    "TensorFlow", "PyTorch", "Machine Learning", "Computer Vision", "NLP",
)


@dataclass(frozen=True)
class ImpactWeights:
    roi_weight: float = 3.0
    cost_savings_divisor: float = 100.0
    metric_base: float = 20.0
    improvement_weight: float = 2.0
    capability_base: float = 30.0
    accuracy_weight: float = 1.5
    featured_bonus: float = 150.0
    advanced_tech_bonus: float = 25.0


DEFAULT_WEIGHTS = ImpactWeights()


def _business_impact_score(record: object, w: ImpactWeights) -> float:
    impact = getattr(record, "business_impact", None)
    if impact is None:
        return 0.0
    score = parse_metric_number(getattr(impact, "roi", None)) * w.roi_weight
    if w.cost_savings_divisor:
        score += parse_metric_number(getattr(impact, "cost_savings", None)) / w.cost_savings_divisor
    return score


def _metrics_score(record: object, w: ImpactWeights) -> float:
    score = 0.0
    for metric in getattr(record, "metrics", None) or []:
        score += w.metric_base
        score += parse_metric_number(getattr(metric, "improvement", None)) * w.improvement_weight
    return score


def _capabilities_score(record: object, w: ImpactWeights) -> float:
    score = 0.0
    for capability in getattr(record, "ai_capabilities", None) or []:
        score += w.capability_base
        accuracy = getattr(capability, "accuracy", None)
        if isinstance(accuracy, (int, float)) and not isinstance(accuracy, bool):
            score += accuracy * w.accuracy_weight
    return score


def count_advanced_technologies(technologies: list[str] | None) -> int:
    return sum(
        1 for tech in technologies or []
        if any(term in tech for term in ADVANCED_TECHNOLOGIES)
    )


def compute_impact_score(record: object, weights: ImpactWeights = DEFAULT_WEIGHTS) -> float:
    """Sum of business-impact, metric, capability, featured and technology signals."""
    score = _business_impact_score(record, weights)
    score += _metrics_score(record, weights)
    score += _capabilities_score(record, weights)
    if getattr(record, "featured", False) is True:
        score += weights.featured_bonus
    score += count_advanced_technologies(getattr(record, "technologies", None)) * weights.advanced_tech_bonus
    return score


def technology_score(technologies: list[str] | None) -> int:
    """Technology-sophistication ranking: count + 3 per advanced technology."""
    techs = technologies or []
    advanced = sum(
        1 for tech in techs
        if any(term in tech for term in (*ADVANCED_TECHNOLOGIES, "Deep Learning"))
    )
    return len(techs) + advanced * 3
