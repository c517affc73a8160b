"""Tests for operation kinds, models, rule table and wire codec."""

import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from typedpatch.core.operation import (
    REQUIRES_FROM,
    REQUIRES_PATH_WRITE,
    REQUIRES_VALUE,
    RULES,
    UNSUPPORTED_RULE,
    OperationType,
    PatchExecutionResult,
    PatchOperation,
    dump_operation,
    dump_operations,
    parse_operations,
    rule_for,
)
from typedpatch.core.operation import messages


@pytest.mark.parametrize("name", ["replace", "Replace", "REPLACE", " replace "])
def test_parse_ignores_case(name):
    assert OperationType.parse(name) is OperationType.REPLACE


def test_parse_rejects_unknown_kind():
    with pytest.raises(ValueError, match="Invalid operation type: merge"):
        OperationType.parse("merge")


def test_wire_and_display_names():
    assert OperationType.MOVE.wire_name == "move"
    assert OperationType.MOVE.display_name == "Move"


def test_flag_values_are_distinct_bits():
    values = [member.value for member in OperationType]

    assert values == [1, 2, 4, 8, 16, 32]


def test_group_membership():
    assert OperationType.REPLACE in REQUIRES_VALUE
    assert OperationType.TEST not in REQUIRES_VALUE
    assert OperationType.MOVE in REQUIRES_FROM
    assert OperationType.TEST not in REQUIRES_PATH_WRITE


@pytest.mark.parametrize(
    ("op", "expected"),
    [
        (OperationType.ADD, (True, False, False, True, False, False)),
        (OperationType.COPY, (False, True, False, True, True, False)),
        (OperationType.MOVE, (False, True, False, True, True, True)),
        (OperationType.REMOVE, (False, False, False, True, False, False)),
        (OperationType.REPLACE, (True, False, False, True, False, False)),
        (OperationType.TEST, (False, False, True, False, False, False)),
    ],
)
def test_rule_table(op, expected):
    rule = RULES[op]

    assert (
        rule.requires_value,
        rule.requires_from,
        rule.path_read,
        rule.path_write,
        rule.from_read,
        rule.from_write,
    ) == expected


def test_combined_flags_have_no_rule():
    assert rule_for(OperationType.ADD | OperationType.TEST) is UNSUPPORTED_RULE
    assert rule_for(OperationType(0)) is UNSUPPORTED_RULE


def test_rules_are_read_only():
    with pytest.raises(TypeError):
        RULES[OperationType.ADD] = UNSUPPORTED_RULE  # type: ignore[index]


def test_operation_accepts_kind_names_and_wire_alias():
    operation = PatchOperation.model_validate({"op": "Move", "from": "/a", "path": "/b"})

    assert operation.op is OperationType.MOVE
    assert operation.from_ == "/a"
    assert operation.value is None


def test_operation_path_defaults_to_empty():
    assert PatchOperation(op=OperationType.REMOVE).path == ""


def test_operation_rejects_unknown_kind():
    with pytest.raises(PydanticValidationError):
        PatchOperation(op="merge", path="/a")


def test_result_factories():
    operation = PatchOperation(op="replace", path="/name", value="Ada")

    ok = PatchExecutionResult.succeeded(operation)
    bad = PatchExecutionResult.failed(operation, "boom")

    assert ok.success and ok.error_message is None
    assert not bad.success and bad.error_message == "boom"
    assert bad.op is OperationType.REPLACE
    assert bad.path == "/name"
    assert bad.value == "Ada"
    assert bad.from_ is None


def test_result_to_operation_is_a_copy():
    operation = PatchOperation(op="copy", path="/b", from_="/a")
    result = PatchExecutionResult.failed(operation, "boom")

    plain = result.to_operation()

    assert plain == operation
    assert plain is not operation


def test_messages_use_display_names():
    assert messages.operation_requires_path(OperationType.TEST) == "Test operation requires a path."
    assert (
        messages.operation_path_not_valid(OperationType.REPLACE, "/x", "Profile")
        == "Replace operation path '/x' is not valid for type Profile."
    )
    assert "Profile cannot be patched" in messages.type_not_patchable("Profile")


def test_parse_operations_from_json():
    text = '[{"op": "Replace", "path": "/name", "value": "Ada"}, {"op": "remove", "path": "/age"}]'

    operations = parse_operations(text)

    assert [operation.op for operation in operations] == [
        OperationType.REPLACE,
        OperationType.REMOVE,
    ]
    assert operations[0].value == "Ada"


def test_parse_operations_from_objects():
    operations = parse_operations([{"op": "copy", "from": "/a", "path": "/b"}])

    assert operations[0].from_ == "/a"


def test_dump_omits_absent_fields():
    operations = [
        PatchOperation(op="remove", path="/age"),
        PatchOperation(op="move", path="/b", from_="/a"),
    ]

    assert json.loads(dump_operations(operations)) == [
        {"op": "remove", "path": "/age"},
        {"op": "move", "path": "/b", "from": "/a"},
    ]


def test_dump_single_operation():
    assert dump_operation(PatchOperation(op="TEST", path="/n", value=3)) == {
        "op": "test",
        "path": "/n",
        "value": 3,
    }
