"""Tests formulaires : règles states, contrôles génériques, cycle complet."""
from welcome_block.core.forms import FormField, FormSpec, FormState, StateCondition, process_block_form, validate_elements


def _select_form():
    return FormSpec(fields=[
        FormField(name="date_format", type="select", title="Date Format",
                  options={"medium": "Medium", "custom": "Custom"}, required=True),
        FormField(name="date_format_custom", type="textfield", title="Pattern"),
    ])


def test_state_condition_matches():
    cond = StateCondition(field="date_format", value="custom")
    assert cond.matches({"date_format": "custom"})
    assert not cond.matches({"date_format": "short"})
    assert not cond.matches({})


def test_field_without_states_always_visible():
    f = FormField(name="x", type="textfield", title="X")
    assert f.is_visible({})
    assert not f.is_required({})


def test_required_select_missing():
    state = FormState({"date_format": "", "date_format_custom": ""})
    validate_elements(_select_form(), state)
    assert state.errors == {"date_format": "Date Format field is required."}


def test_illegal_choice():
    state = FormState({"date_format": "nope"})
    validate_elements(_select_form(), state)
    assert "illegal choice" in state.errors["date_format"]


def test_valid_choice_no_error():
    state = FormState({"date_format": "medium"})
    validate_elements(_select_form(), state)
    assert not state.has_errors()


def test_first_error_kept():
    state = FormState()
    state.set_error_by_name("x", "first")
    state.set_error_by_name("x", "second")
    assert state.errors == {"x": "first"}


# ── process_block_form ───────────────────────────────────────────────────────

def test_process_normalizes_then_submits(make_block):
    block = make_block()
    state = process_block_form(block, {
        "welcome_message": "Hello",
        "date_format": "medium",
        "date_format_custom": "Y-m-d",
    })
    assert not state.has_errors()
    assert block.get_configuration() == {
        "welcome_message": "Hello",
        "date_format": "medium",
        "date_format_custom": "",
    }


def test_process_custom_keeps_pattern(make_block):
    block = make_block()
    process_block_form(block, {"welcome_message": "Hi!", "date_format": "custom", "date_format_custom": "Y-m-d"})
    assert block.configuration["date_format_custom"] == "Y-m-d"


def test_process_custom_with_empty_pattern_accepted(make_block):
    block = make_block()
    state = process_block_form(block, {"date_format": "custom", "date_format_custom": ""})
    assert not state.has_errors()
    assert block.configuration["date_format_custom"] == ""


def test_process_errors_skip_submit(make_block):
    block = make_block({"welcome_message": "Before"})
    state = process_block_form(block, {"welcome_message": "After", "date_format": "bogus"})
    assert state.has_errors()
    assert block.configuration["welcome_message"] == "Before"
