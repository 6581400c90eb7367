import itertools
from decimal import Decimal

import pytest

from optbind import (
    ArgumentList,
    CollectedKey,
    CollectedParameter,
    Command,
    CommandGroup,
    Flag,
    Key,
    OptionalCollectedParameter,
    OptionalParameter,
    OptionSplitter,
    Parameter,
    Parser,
)
from optbind.exceptions import (
    ConversionFailure,
    DeclarationError,
    ExpectedValueAfterKeyError,
    InvalidKeyValueError,
    MissingParameterError,
    UnexpectedArgumentError,
    UnrecognizedOptionError,
    ValidationFailure,
)
from optbind.parser import ScanMode, Scanner
from optbind.parser.parser_types import Bindings
from optbind.validators import allowing, custom, greater_than, rejecting


def tester(*commands: Command) -> CommandGroup:
    return CommandGroup("tester", children=commands)


def parse(command: Command, line: str):
    return Parser().parse(tester(command), ArgumentList.from_string(line))


def test_simple_flag_parsing():
    cmd = Command("cmd")
    alpha = cmd.add_flag("-a")
    beta = cmd.add_flag("-b")

    result = parse(cmd, "cmd -a -b")

    assert result.command is cmd
    assert result[alpha] is True
    assert result[beta] is True


def test_simple_key_parsing():
    cmd = Command("cmd")
    alpha = cmd.add_key("-a")
    beta = cmd.add_key("-b")

    result = parse(cmd, "cmd -a apple -b banana")

    assert result[alpha] == "apple"
    assert result[beta] == "banana"


def test_key_value_conversion():
    cmd = Command("cmd")
    alpha = cmd.add_key("-a", type=int)

    result = parse(cmd, "cmd -a 7")

    assert result[alpha] == 7


def test_key_accepts_negative_number_value():
    cmd = Command("cmd")
    offset = cmd.add_key("-o", "--offset", type=int)

    assert parse(cmd, "cmd --offset -3")[offset] == -3


def test_combined_flags_keys_and_parameters():
    cmd = Command("cmd")
    alpha = cmd.add_flag("-a")
    beta = cmd.add_key("-b")
    param = cmd.add_parameter(Parameter("param"))

    result = parse(cmd, "cmd -a argument -b banana")

    assert result[alpha] is True
    assert result[beta] == "banana"
    assert result[param] == "argument"
    assert result.positional_tokens == ["argument"]


def test_unset_declarations_report_defaults():
    cmd = Command("cmd")
    alpha = cmd.add_flag("-a")
    beta = cmd.add_key("-b", default="fallback")
    files = cmd.add_collected_key("-f")

    result = parse(cmd, "cmd")

    assert result[alpha] is False
    assert result[beta] == "fallback"
    assert result[files] == []
    assert not result.present(alpha)
    assert not result.present(beta)


def test_unrecognized_option():
    cmd = Command("cmd")
    cmd.add_flag("-a")

    with pytest.raises(UnrecognizedOptionError) as excinfo:
        parse(cmd, "cmd -a -b")
    assert excinfo.value.token == "-b"


def test_key_not_given_a_value():
    cmd = Command("cmd")
    cmd.add_flag("-a")
    cmd.add_key("-b")

    with pytest.raises(ExpectedValueAfterKeyError) as excinfo:
        parse(cmd, "cmd -b -a")
    assert excinfo.value.key == "-b"


def test_key_at_end_of_tokens():
    cmd = Command("cmd")
    cmd.add_key("-n", "--name")

    with pytest.raises(ExpectedValueAfterKeyError) as excinfo:
        parse(cmd, "cmd --name")
    assert excinfo.value.key == "--name"


def test_conversion_error_names_declaration_and_key():
    cmd = Command("cmd")
    alpha = cmd.add_key("-a", "--alpha", type=int)

    with pytest.raises(InvalidKeyValueError) as excinfo:
        parse(cmd, "cmd -a val")

    error = excinfo.value
    assert error.option is alpha
    assert error.key == "-a"
    assert isinstance(error.reason, ConversionFailure)
    assert error.is_conversion_error
    assert str(error) == "Invalid value passed to '-a': 'val' is not a valid int"


def test_any_converter_exception_is_a_conversion_error():
    class NotAPort(Exception):
        pass

    def port(raw):
        raise NotAPort(raw)

    cmd = Command("cmd")
    amount = cmd.add_key("-a", type=Decimal)
    cmd.add_key("-p", type=port)

    with pytest.raises(InvalidKeyValueError) as excinfo:
        parse(cmd, "cmd -a abc")
    assert excinfo.value.option is amount
    assert excinfo.value.is_conversion_error

    with pytest.raises(InvalidKeyValueError) as excinfo:
        parse(cmd, "cmd -p http")
    assert isinstance(excinfo.value.__cause__, NotAPort)

    assert parse(cmd, "cmd -a 1.50")[amount] == Decimal("1.50")


def test_flag_splitting():
    cmd = Command("cmd")
    alpha = cmd.add_flag("-a")
    beta = cmd.add_flag("-b")
    arguments = ArgumentList.from_string("cmd -ab")
    OptionSplitter().manipulate(arguments)

    result = Parser().parse(tester(cmd), arguments)

    assert result[alpha] is True
    assert result[beta] is True


def test_collected_key_accumulates_across_aliases():
    cmd = Command("cmd")
    files = cmd.add_collected_key("-f", "--file")

    result = parse(cmd, "cmd -f firstFile --file secondFile")

    assert result[files] == ["firstFile", "secondFile"]


def test_collected_key_converts_each_value():
    cmd = Command("cmd")
    ports = cmd.add_collected_key("-p", type=int, validators=[greater_than(0)])

    assert parse(cmd, "cmd -p 80 -p 443")[ports] == [80, 443]
    with pytest.raises(InvalidKeyValueError):
        parse(cmd, "cmd -p 80 -p 0")


def test_reverse_flag_default():
    cmd = Command("cmd")
    flag = cmd.add_flag("-r", "--reverse", default=True)

    assert parse(cmd, "cmd")[flag] is True
    assert parse(cmd, "cmd -r")[flag] is False


def test_declarations_are_not_mutated_between_parses():
    cmd = Command("cmd")
    flag = cmd.add_flag("-a")
    group = tester(cmd)

    first = Parser().parse(group, ["cmd", "-a"])
    second = Parser().parse(group, ["cmd"])

    assert first[flag] is True
    assert second[flag] is False


def test_validation():
    cmd = Command("cmd")
    first_name = cmd.add_key(
        "-n",
        validators=[custom("Must be a capitalized first name", lambda s: s[:1].isupper())],
    )
    age = cmd.add_key("-a", type=int, validators=[greater_than(18)])
    location = cmd.add_key("-l", validators=[rejecting("Chicago", "Boston")])
    holiday = cmd.add_key("--holiday", validators=[allowing("Thanksgiving", "Halloween")])

    cases = [
        ("cmd -n jake", first_name, "-n", "Must be a capitalized first name"),
        ("cmd -a 15", age, "-a", "must be greater than 18"),
        ("cmd -l Chicago", location, "-l", "must not be: Chicago, Boston"),
        ("cmd --holiday 4th", holiday, "--holiday", "must be one of: Thanksgiving, Halloween"),
    ]
    for line, option, key, message in cases:
        with pytest.raises(InvalidKeyValueError) as excinfo:
            parse(cmd, line)
        error = excinfo.value
        assert error.option is option
        assert error.key == key
        assert isinstance(error.reason, ValidationFailure)
        assert error.reason.message == message

    assert parse(cmd, "cmd -n Jake")[first_name] == "Jake"
    assert parse(cmd, "cmd -a 19")[age] == 19
    assert parse(cmd, "cmd -l Denver")[location] == "Denver"
    assert parse(cmd, "cmd --holiday Thanksgiving")[holiday] == "Thanksgiving"


def test_first_failing_validator_is_reported():
    cmd = Command("cmd")
    number = cmd.add_key(
        "-n",
        type=int,
        validators=[greater_than(0), custom("must be even", lambda n: n % 2 == 0)],
    )

    with pytest.raises(InvalidKeyValueError) as excinfo:
        parse(cmd, "cmd -n -3")
    assert excinfo.value.reason.message == "must be greater than 0"
    assert excinfo.value.option is number

    with pytest.raises(InvalidKeyValueError) as excinfo:
        parse(cmd, "cmd -n 3")
    assert excinfo.value.reason.message == "must be even"


def test_full_parse():
    cmd = Command("test")
    test_name = cmd.add_parameter(Parameter("testName"))
    tester_name = cmd.add_parameter(OptionalParameter("testerName"))
    silent = cmd.add_flag("-s", "--silent")
    times = cmd.add_key("-t", "--times", type=int)

    result = Parser().parse(tester(cmd), ["test", "-s", "favTest", "-t", "3", "SwiftCLI"])

    assert result.command is cmd
    assert result[test_name] == "favTest"
    assert result[tester_name] == "SwiftCLI"
    assert result[silent] is True
    assert result[times] == 3
    assert result.path == ["test"]


def run_command():
    cmd = Command("run")
    executable = cmd.add_parameter(Parameter("executable"))
    args = cmd.add_parameter(OptionalCollectedParameter("args"))
    verbose = cmd.add_flag("-v")
    return cmd, executable, args, verbose


def test_collected_parameter_locks_after_required_parameters():
    cmd, executable, args, verbose = run_command()

    result = parse(cmd, "run cli -v arg")

    assert result.command is cmd
    assert result[executable] == "cli"
    assert result[args] == ["-v", "arg"]
    assert result[verbose] is False


def test_options_before_lock_are_still_bound():
    cmd, executable, args, verbose = run_command()

    result = parse(cmd, "run -v cli arg")

    assert result[executable] == "cli"
    assert result[args] == ["arg"]
    assert result[verbose] is True
    assert result.positional_tokens == ["cli", "arg"]


def test_locked_scanner_keeps_option_shaped_tokens_verbatim():
    cmd, executable, args, _ = run_command()

    result = parse(cmd, "run cli --unknown -h --")

    assert result[args] == ["--unknown", "-h", "--"]


def test_optional_parameters_fill_before_lock():
    cmd = Command("cp")
    source = cmd.add_parameter(Parameter("source"))
    target = cmd.add_parameter(OptionalParameter("target"))
    rest = cmd.add_parameter(CollectedParameter("rest"))
    force = cmd.add_flag("-f")

    result = parse(cmd, "cp a -f b c -f")

    assert result[source] == "a"
    assert result[target] == "b"
    assert result[force] is True
    assert result[rest] == ["c", "-f"]


def test_collected_only_command_locks_on_first_positional():
    cmd = Command("echo")
    words = cmd.add_parameter(CollectedParameter("words"))
    newline = cmd.add_flag("-n")

    result = parse(cmd, "echo -n hello -n")

    assert result[newline] is True
    assert result[words] == ["hello", "-n"]


def test_missing_required_parameter():
    cmd = Command("cmd")
    first = cmd.add_parameter(Parameter("first"))
    cmd.add_parameter(Parameter("second"))

    with pytest.raises(MissingParameterError) as excinfo:
        parse(cmd, "cmd")
    assert excinfo.value.parameter is first


def test_missing_second_required_parameter():
    cmd = Command("cmd")
    cmd.add_parameter(Parameter("first"))
    second = cmd.add_parameter(Parameter("second"))

    with pytest.raises(MissingParameterError) as excinfo:
        parse(cmd, "cmd one")
    assert excinfo.value.parameter is second


def test_required_collected_parameter_needs_a_token():
    cmd = Command("cat")
    files = cmd.add_parameter(CollectedParameter("files", required=True))

    with pytest.raises(MissingParameterError) as excinfo:
        parse(cmd, "cat")
    assert excinfo.value.parameter is files
    assert parse(cmd, "cat a b")[files] == ["a", "b"]


def test_optional_parameter_may_stay_unbound():
    cmd = Command("cmd")
    name = cmd.add_parameter(OptionalParameter("name"))

    result = parse(cmd, "cmd")

    assert result[name] is None
    assert not result.present(name)


def test_too_many_positional_arguments():
    cmd = Command("cmd")
    cmd.add_parameter(Parameter("only"))

    with pytest.raises(UnexpectedArgumentError) as excinfo:
        parse(cmd, "cmd one two")
    assert excinfo.value.token == "two"


def test_option_scanning_is_position_independent_without_collected_parameter():
    cmd = Command("cmd")
    first = cmd.add_parameter(Parameter("first"))
    second = cmd.add_parameter(OptionalParameter("second"))
    alpha = cmd.add_flag("-a")
    beta = cmd.add_key("-b")

    tokens = ["one", "two", "-a", ("-b", "x")]
    for order in itertools.permutations(tokens):
        flat: list[str] = []
        for token in order:
            flat.extend(token if isinstance(token, tuple) else [token])
        result = Parser().parse(cmd, flat)
        expected_first, expected_second = [t for t in flat if t in ("one", "two")]
        assert result[first] == expected_first
        assert result[second] == expected_second
        assert result[alpha] is True
        assert result[beta] == "x"


def test_flag_toggling_is_order_independent():
    cmd = Command("cmd")
    flags = [
        cmd.add_flag("-a"),
        cmd.add_flag("-b", default=True),
        cmd.add_flag("-c"),
    ]

    for order in itertools.permutations(["-a", "-b"]):
        result = Parser().parse(cmd, list(order))
        assert [result[flag] for flag in flags] == [True, False, False]


def test_parse_directly_against_command():
    cmd = Command("cmd")
    alpha = cmd.add_flag("-a")

    result = Parser().parse(cmd, ["-a"])

    assert result.command is cmd
    assert result[alpha] is True


def test_as_dict_includes_defaults():
    cmd, executable, args, verbose = run_command()

    result = parse(cmd, "run cli")

    assert result.as_dict() == {"v": False, "executable": "cli", "args": []}


def test_scanner_reports_locked_mode():
    cmd, executable, args, _ = run_command()
    arguments = ArgumentList(["cli", "x"])
    bindings = Bindings()

    scanner = Scanner(cmd, arguments, bindings)
    scanner.scan()

    assert scanner.mode is ScanMode.LOCKED
    assert bindings[args] == ["x"]
    assert not arguments.has_next()


def test_scanner_stays_scanning_without_collected_parameter():
    cmd = Command("cmd")
    cmd.add_parameter(Parameter("first"))
    cmd.add_flag("-a")
    scanner = Scanner(cmd, ArgumentList(["x", "-a"]), Bindings())

    scanner.scan()

    assert scanner.mode is ScanMode.SCANNING


def test_bare_dash_is_positional():
    cmd = Command("cmd")
    source = cmd.add_parameter(Parameter("source"))

    assert parse(cmd, "cmd -")[source] == "-"


def test_help_flag_raises_help_signal():
    from optbind.signals import HelpSignal

    cmd = Command("cmd")
    cmd.add_parameter(Parameter("required"))

    with pytest.raises(HelpSignal) as excinfo:
        parse(cmd, "cmd --help")
    assert excinfo.value.target is cmd
    assert excinfo.value.path == ["cmd"]


def test_command_without_help_flag_rejects_it():
    cmd = Command("cmd", help_flag=False)

    with pytest.raises(UnrecognizedOptionError):
        parse(cmd, "cmd -h")


def test_flag_type_is_enforced():
    with pytest.raises(DeclarationError):
        Flag("-a", default="yes")
    assert Key("-k").default is None
    assert CollectedKey("-k").default == []
