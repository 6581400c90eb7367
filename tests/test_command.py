import pytest

from optbind import (
    CollectedParameter,
    Command,
    CommandGroup,
    Flag,
    Key,
    OptionalParameter,
    Parameter,
)
from optbind.exceptions import CommandAlreadyExistsError, DeclarationError


def test_duplicate_keys_are_rejected():
    cmd = Command("cmd")
    cmd.add_flag("-a", "--alpha")

    with pytest.raises(DeclarationError):
        cmd.add_key("-a")


def test_help_keys_are_reserved():
    cmd = Command("cmd")

    with pytest.raises(DeclarationError):
        cmd.add_flag("-h")
    Command("cmd", help_flag=False).add_flag("-h", "--host")


def test_duplicate_dest_is_rejected():
    cmd = Command("cmd")
    cmd.add_flag("--verbose")

    with pytest.raises(DeclarationError):
        cmd.add_parameter(Parameter("verbose"))


@pytest.mark.parametrize("keys", [("a",), ("--",), ("-ab",), ("-a", "-a"), ()])
def test_malformed_keys(keys):
    with pytest.raises(DeclarationError):
        Flag(*keys)


def test_dest_prefers_long_key():
    assert Key("-d", "--dry-run").dest == "dry_run"
    assert Flag("-v").dest == "v"
    assert Flag("-v", dest="loud").dest == "loud"
    with pytest.raises(DeclarationError):
        Flag("-v", dest="9lives")


def test_parameter_order_is_enforced():
    cmd = Command("cmd")
    cmd.add_parameter(OptionalParameter("maybe"))

    with pytest.raises(DeclarationError):
        cmd.add_parameter(Parameter("must"))

    cmd.add_parameter(CollectedParameter("rest"))
    with pytest.raises(DeclarationError):
        cmd.add_parameter(OptionalParameter("after"))


def test_key_type_must_be_callable():
    with pytest.raises(DeclarationError):
        Key("-k", type="int")


def test_declarations_have_distinct_ids():
    first, second = Flag("-a"), Flag("-a")
    assert first.id != second.id


def test_command_group_rejects_duplicate_names():
    group = CommandGroup("tester", children=[Command("cmd", aliases=["c"])])

    with pytest.raises(CommandAlreadyExistsError):
        group.add_command(Command("c"))


def test_global_option_cannot_use_help_keys():
    group = CommandGroup("tester")

    with pytest.raises(DeclarationError):
        group.add_global_option(Flag("-h"))


def test_execute_calls_callable():
    seen = []
    cmd = Command("cmd", execute=lambda result: seen.append(result) or 3)

    assert cmd.execute("result") == 3
    assert seen == ["result"]
    assert Command("noop").execute("result") is None


def test_signature():
    cmd = Command(
        "cp",
        parameters=[Parameter("src"), OptionalParameter("dst"), CollectedParameter("rest")],
    )
    assert cmd.signature == "<src> [<dst>] [<rest>] ..."


def test_declarations_compare_and_hash_by_id():
    flag = Flag("-a")
    other = Flag("-a")

    assert flag == flag
    assert flag != other
    assert {flag: 1}[flag] == 1
    assert len({flag, other, flag}) == 2
    assert flag != "-a"


def test_add_commands_registers_each_child():
    group = CommandGroup("tester")
    run, stop = Command("run"), Command("stop", aliases=["halt"])

    group.add_commands([run, stop])

    assert group.children == (run, stop)
    assert group.find("halt") is stop
    with pytest.raises(CommandAlreadyExistsError):
        group.add_commands([Command("run")])
