from blockbreaker.services.analysis.decryptor import BlockReconstruction
from blockbreaker.services.analysis.statistics import (
    SegmentDiagnosis,
    SegmentProfile,
    SegmentVerdict,
)
from blockbreaker.services.validation.dictionary import ScoreResult


class ExplanationGenerator:
    """
    Generates human-readable explanations for cryptanalysis results.

    All explanations are grounded in actual statistics and metrics.
    """

    # Reference values for comparisons
    ENGLISH_IOC = 0.0667
    RANDOM_IOC = 0.0385

    def explain_diagnosis(self, diagnosis: SegmentDiagnosis) -> list[str]:
        """
        Explain the Caesar vs substitution segment comparison.

        Args:
            diagnosis: Result of FrequencyAnalyzer.diagnose_segments

        Returns:
            List of explanation strings
        """
        explanations = []

        for profile in (diagnosis.caesar, diagnosis.substitution):
            explanations.append(self._explain_segment(profile))

        if diagnosis.monoalphabetic_segment is None:
            explanations.append(
                "Not enough ciphertext to tell the segments apart yet."
            )
        else:
            explanations.append(
                f"The {diagnosis.monoalphabetic_segment} segment keeps the skew of "
                "natural language, so it is the monoalphabetic part to attack first."
            )

        return explanations

    def _explain_segment(self, profile: SegmentProfile) -> str:
        segment = profile.segment
        label = (
            f"{profile.name.capitalize()} segment "
            f"(positions {segment.start}-{segment.start + segment.length - 1} of every "
            f"{segment.block_size}-letter block, {profile.letters} letters)"
        )

        if profile.verdict == SegmentVerdict.INSUFFICIENT_DATA:
            return f"{label}: too few letters for a reliable reading."

        ioc = profile.index_of_coincidence
        if profile.verdict == SegmentVerdict.SKEWED:
            reading = (
                f"IoC {ioc:.4f} is close to English ({self.ENGLISH_IOC:.4f}), "
                "the distribution is SKEWED like a fixed letter mapping"
            )
        else:
            reading = (
                f"IoC {ioc:.4f} is close to random ({self.RANDOM_IOC:.4f}), "
                "the distribution is FLAT like a shifting key"
            )

        return (
            f"{label}: {reading} "
            f"(chi-square vs uniform {profile.flatness_statistic:.1f}, "
            f"p={profile.flatness_p_value:.3g}; "
            f"rank correlation with English {profile.english_correlation:.2f})."
        )

    def explain_progress(
        self,
        blocks: list[BlockReconstruction],
        score: ScoreResult | None = None,
    ) -> list[str]:
        """Explain how much of the text the current guesses recover."""
        explanations = []

        if not blocks:
            explanations.append("There is no ciphertext to reconstruct.")
            return explanations

        total = len(blocks)
        substitution_done = sum(1 for b in blocks if b.substitution_resolved)
        fully_done = sum(1 for b in blocks if b.fully_resolved)

        explanations.append(
            f"{substitution_done} of {total} blocks have a fully guessed substitution segment."
        )
        explanations.append(
            f"{fully_done} of {total} blocks are completely decrypted, "
            "their Caesar shift taken from the first substitution letter."
        )

        if substitution_done < total:
            pending = [str(b.index) for b in blocks if not b.substitution_resolved][:10]
            explanations.append(
                f"Caesar letters stay unknown in blocks {', '.join(pending)}"
                + ("..." if total - substitution_done > len(pending) else "")
                + "."
            )

        if score is not None:
            explanations.append(score.summary)

        return explanations
