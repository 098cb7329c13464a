"""State channels of the headline analyzer pipeline."""

from __future__ import annotations

from newsframes.cortex.state import Channel, ChannelRegistry, append

ANALYSIS_FIELDS = {
    "cognitive_frames": "cognitive_frames_analysis_result",
    "speculative_reframing": "speculative_reframing_result",
    "euphemism": "euphemism_analysis_result",
    "episodic_thematic": "episodic_thematic_analysis_result",
    "violence_type": "violence_type_analysis_result",
}

HEADLINE_CHANNELS = ChannelRegistry(
    {
        # Input
        "input_headline": Channel(),
        "headline_to_analyze": Channel(),
        # Anonymization
        "headline_with_placeholders": Channel(),
        "properNoun_map": Channel(default=dict),
        "anonymization_result": Channel(),
        # Analyses
        **{field: Channel() for field in ANALYSIS_FIELDS.values()},
        # Synthesis
        "synthesis_result": Channel(),
        "main_flipped_headline_with_placeholders": Channel(),
        "analysis_error_flags": Channel(default=dict),
        # Reversion
        "flipped_headline": Channel(),
        "main_reverter_details": Channel(),
        "speculative_reverted_headline": Channel(),
        "speculative_reverter_details": Channel(),
        "episodic_thematic_reverted_headline": Channel(),
        "episodic_thematic_reverter_details": Channel(),
        "violence_type_reverted_headline": Channel(),
        "violence_type_reverter_details": Channel(),
        # Persistence
        "data_package_for_saver": Channel(),
        "db_save_status": Channel(),
        # Accumulated across steps
        "error_messages": Channel(merge=append, default=list),
    }
)

__all__ = ["ANALYSIS_FIELDS", "HEADLINE_CHANNELS"]
