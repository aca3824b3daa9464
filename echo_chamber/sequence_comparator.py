"""
Sequence Comparator

Scores how alike two analyses are. Pure function of the two results; the
analyzer is responsible for producing them.
"""

from .sequence_model import (
    AnalysisResult,
    BASE_SIMILARITY,
    PARAMETER_BONUS,
    MAX_SIMILARITY,
    RATIO_SIMILARITY_TOLERANCE,
)


def calculate_similarity(result_a: AnalysisResult, result_b: AnalysisResult) -> int:
    """
    Similarity score 0-100.

    Different patterns score 0. Same pattern scores BASE_SIMILARITY plus
    PARAMETER_BONUS for an identical common difference and PARAMETER_BONUS
    for common ratios closer than RATIO_SIMILARITY_TOLERANCE. A result has
    at most one of the two parameters, so at most one bonus applies.
    """
    if result_a.pattern != result_b.pattern:
        return 0

    similarity = BASE_SIMILARITY

    if (result_a.common_difference is not None
            and result_b.common_difference is not None
            and result_a.common_difference == result_b.common_difference):
        similarity += PARAMETER_BONUS

    if (result_a.common_ratio is not None
            and result_b.common_ratio is not None
            and abs(result_a.common_ratio - result_b.common_ratio) < RATIO_SIMILARITY_TOLERANCE):
        similarity += PARAMETER_BONUS

    return min(similarity, MAX_SIMILARITY)
