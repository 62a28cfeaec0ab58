"""
Cross-Source Reconciliation Service

Reconciles the same ratios reported by several independent data sources
(exchange filings, data vendors, in-house calculations) for one company.

For every metric reported by at least two sources:
- Mean and population standard deviation across the sources
- Every pair of sources agrees when their values differ by at most 2 sigma,
  or by at most 5% of the mean
- A source is an outlier when its value is more than 2 sigma from the mean
  and sigma exceeds 0.01 (near-constant series never produce outliers)

Overall:
    sourceAgreement = agreeing pairs / compared pairs
    consensus accuracy = mean over metrics of the share of reporting sources
        not flagged as outliers on this or any earlier metric
    confidence = min(agreement * (sources / 3) * (1 - outliers / sources), 0.99)

More corroborating sources raise confidence; a high share of outlier sources
lowers it; confidence never reaches certainty.
"""

import logging
from typing import Dict, List, Sequence

import numpy as np

from cyclescope.models.schemas import (
    ConsensusSummary,
    CrossValidationResult,
    CrossValidationSource,
)


logger = logging.getLogger(__name__)


SIGMA_MULTIPLIER: float = 2.0
RELATIVE_AGREEMENT: float = 0.05
MIN_OUTLIER_SIGMA: float = 0.01
MAX_CONFIDENCE: float = 0.99
CORROBORATING_SOURCES: int = 3


def _values_agree(a: float, b: float, threshold: float, mean_val: float) -> bool:
    deviation = abs(a - b)
    if deviation <= threshold:
        return True
    if mean_val == 0.0:
        return deviation == 0.0
    return deviation / abs(mean_val) <= RELATIVE_AGREEMENT


async def validate_cross_data_sources(
    sources: Sequence[CrossValidationSource]
) -> CrossValidationResult:
    """
    Measure agreement between data sources and flag outlier sources.

    Args:
        sources: One entry per data source

    Returns:
        CrossValidationResult; fewer than two sources yield zero agreement
        and zero confidence
    """
    if len(sources) < 2:
        return CrossValidationResult(
            consensus=ConsensusSummary(accuracy=0.0),
            sourceAgreement=0.0,
            outliers=[],
            confidence=0.0,
        )

    # Metrics in first-seen order
    metrics: Dict[str, None] = {}
    for source in sources:
        for metric in source.ratios:
            metrics.setdefault(metric, None)

    total_agreements = 0
    total_comparisons = 0
    outliers: List[CrossValidationSource] = []
    outlier_names = set()
    consensus_scores: List[float] = []

    for metric in metrics:
        reported = [(source, source.ratios[metric]) for source in sources if metric in source.ratios]
        if len(reported) < 2:
            continue

        values = np.asarray([value for _, value in reported], dtype=np.float64)
        mean_val = float(np.mean(values))
        std_val = float(np.std(values))  # Population std (ddof=0)
        threshold = std_val * SIGMA_MULTIPLIER

        for i in range(len(values)):
            for j in range(i + 1, len(values)):
                total_comparisons += 1
                if _values_agree(float(values[i]), float(values[j]), threshold, mean_val):
                    total_agreements += 1

        if std_val > MIN_OUTLIER_SIGMA:
            for source, value in reported:
                if abs(value - mean_val) > threshold and source.source not in outlier_names:
                    outlier_names.add(source.source)
                    outliers.append(source)

        # Every outlier source so far that reports this metric counts against it
        flagged = sum(1 for source, _ in reported if source.source in outlier_names)
        consensus_scores.append((len(reported) - flagged) / len(reported))

    source_agreement = total_agreements / total_comparisons if total_comparisons > 0 else 0.0
    consensus_accuracy = float(np.mean(consensus_scores)) if consensus_scores else 0.0

    confidence = min(
        source_agreement * (len(sources) / CORROBORATING_SOURCES) * (1 - len(outliers) / len(sources)),
        MAX_CONFIDENCE,
    )

    if outliers:
        logger.warning(f"Outlier sources: {', '.join(sorted(outlier_names))}")
    logger.info(
        f"Cross-source validation over {len(sources)} sources: agreement={source_agreement:.3f}, "
        f"confidence={confidence:.3f}"
    )

    return CrossValidationResult(
        consensus=ConsensusSummary(accuracy=consensus_accuracy),
        sourceAgreement=source_agreement,
        outliers=outliers,
        confidence=max(0.0, confidence),
    )


__all__ = [
    "validate_cross_data_sources",
]
