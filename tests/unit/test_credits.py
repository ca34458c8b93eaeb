"""Unit tests for credit calculation."""

import math

import pytest

from wizardflow.config.settings import CreditSettings, Settings
from wizardflow.core.builder import StepBuilder
from wizardflow.core.credits import (
    CreditCalculator,
    TablePricing,
    extract_duration,
    extract_resolution,
    get_config_default_duration,
    get_config_default_resolution,
)
from wizardflow.models import (
    OutputType,
    ScenarioConfig,
    SelectionConfig,
    SelectionOption,
    SelectionType,
    StepDefinition,
    StepType,
)


class _RecordingPricing:
    """Pricing stub that records its inputs and returns a fixed value."""

    def __init__(self, result=10.0) -> None:
        self.result = result
        self.calls: list[tuple] = []

    def __call__(self, duration, resolution, output_type, has_image_input):
        self.calls.append((duration, resolution, output_type, has_image_input))
        return self.result


def _duration_step(default: str | None, options: list[SelectionOption]) -> StepDefinition:
    return StepDefinition(
        id="DURATION_SELECTION",
        type=StepType.FEATURE_SELECTION,
        config=SelectionConfig(
            selection_type=SelectionType.DURATION, options=options, default_value=default
        ),
    )


class TestExtraction:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (8, 8),
            (2.5, 2.5),
            ("8", 8),
            ("8s", 8),
            (" 12s ", 12),
            ({"selection": "10s"}, 10),
            ({"selection": 6}, 6),
        ],
    )
    def test_duration_accepted(self, value, expected) -> None:
        assert extract_duration(value) == expected

    @pytest.mark.parametrize(
        "value", [0, -5, "0s", "abc", "8 seconds", "s", True, math.inf, None, {"value": 8}]
    )
    def test_duration_rejected(self, value) -> None:
        assert extract_duration(value) is None

    def test_resolution(self) -> None:
        assert extract_resolution("1080p") == "1080p"
        assert extract_resolution({"selection": " 720p "}) == "720p"
        assert extract_resolution("") is None
        assert extract_resolution(1080) is None


class TestConfigDefaults:
    def test_default_resolved_through_option_value(self) -> None:
        steps = [
            _duration_step(
                "long",
                [
                    SelectionOption(id="short", label="Short", value=5),
                    SelectionOption(id="long", label="Long", value=10),
                ],
            )
        ]
        assert get_config_default_duration(steps) == 10

    def test_default_id_parsed_when_no_option_matches(self) -> None:
        steps = [_duration_step("15s", [SelectionOption(id="5s", label="5", value=5)])]
        assert get_config_default_duration(steps) == 15

    def test_no_default(self) -> None:
        steps = [_duration_step(None, [SelectionOption(id="5s", label="5", value=5)])]
        assert get_config_default_duration(steps) is None
        assert get_config_default_duration([]) is None

    def test_builder_defaults(self, builder: StepBuilder, video_scenario: ScenarioConfig) -> None:
        steps = builder.quick_build(video_scenario)
        assert get_config_default_duration(steps) == 10
        assert get_config_default_resolution(steps) == "720p"


class TestCreditCalculator:
    def test_explicit_selections_win_over_defaults(
        self, builder: StepBuilder, video_scenario: ScenarioConfig
    ) -> None:
        pricing = _RecordingPricing()
        calc = CreditCalculator(pricing, steps=builder.quick_build(video_scenario))
        calc.calculate(
            {"duration": {"selection": "5s"}, "resolution": {"selection": "1080p"}}
        )
        assert pricing.calls[-1] == (5, "1080p", OutputType.VIDEO, False)

    def test_missing_selections_use_config_defaults(
        self, builder: StepBuilder, video_scenario: ScenarioConfig
    ) -> None:
        pricing = _RecordingPricing()
        calc = CreditCalculator(pricing, steps=builder.quick_build(video_scenario))
        calc.calculate({})
        assert pricing.calls[-1][:2] == (10, "720p")

    def test_no_defaults_anywhere(self) -> None:
        pricing = _RecordingPricing()
        CreditCalculator(pricing).calculate(None)
        assert pricing.calls[-1][:2] == (None, None)

    def test_result_rounded_up(self) -> None:
        quote = CreditCalculator(_RecordingPricing(4.2)).calculate()
        assert quote.credits == 5
        assert quote.used_fallback is False

    @pytest.mark.parametrize("bad", [0, -3, math.nan, math.inf, "7", None, True])
    def test_invalid_result_uses_fallback(self, bad) -> None:
        quote = CreditCalculator(_RecordingPricing(bad), fallback_cost=3).calculate()
        assert quote.credits == 3
        assert quote.used_fallback is True

    def test_pricing_errors_propagate(self) -> None:
        def broken(*args):
            raise RuntimeError("pricing down")

        with pytest.raises(RuntimeError, match="pricing down"):
            CreditCalculator(broken).calculate()

    def test_fallback_cost_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            CreditCalculator(_RecordingPricing(), fallback_cost=0)

    def test_has_image_input_override(self) -> None:
        pricing = _RecordingPricing()
        calc = CreditCalculator(pricing, has_image_input=True)
        calc.calculate()
        calc.calculate(has_image_input=False)
        assert [call[3] for call in pricing.calls] == [True, False]

    def test_preview_matches_final_quote(
        self, builder: StepBuilder, video_scenario: ScenarioConfig
    ) -> None:
        calc = CreditCalculator(TablePricing(), steps=builder.quick_build(video_scenario))
        selections = {"resolution": {"selection": "1080p"}}
        preview = calc.preview("duration", {"selection": "5s"}, selections)
        final = calc.calculate({**selections, "duration": {"selection": "5s"}})
        assert preview == final
        assert selections == {"resolution": {"selection": "1080p"}}

    def test_from_settings(self) -> None:
        settings = Settings(credits=CreditSettings(fallback_cost=4, output_type=OutputType.IMAGE))
        calc = CreditCalculator.from_settings(_RecordingPricing(), settings)
        assert calc.fallback_cost == 4
        assert calc.output_type == OutputType.IMAGE

    def test_format_summary(self) -> None:
        quote = CreditCalculator(_RecordingPricing(0), fallback_cost=2).calculate(
            {"duration": 8, "resolution": "720p"}
        )
        assert quote.format_summary() == "2 credits for video, 8s, 720p (fallback)"


class TestTablePricing:
    def test_video_scaled_by_resolution(self) -> None:
        pricing = TablePricing(CreditSettings(credits_per_second=2.0))
        assert pricing(5, "1080p", OutputType.VIDEO, False) == pytest.approx(15.0)

    def test_unknown_resolution_multiplier_is_one(self) -> None:
        assert TablePricing()(4, "weird", OutputType.VIDEO, False) == pytest.approx(4.0)

    def test_video_without_duration_has_no_price(self) -> None:
        assert TablePricing()(None, "720p", OutputType.VIDEO, False) == 0.0

    def test_image_flat_rate_with_surcharge(self) -> None:
        pricing = TablePricing(CreditSettings(image_credits=2.0, image_input_surcharge=1.0))
        assert pricing(None, None, OutputType.IMAGE, True) == pytest.approx(3.0)
