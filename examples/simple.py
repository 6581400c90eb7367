"""simple.py

A `tester` program with a `run` command that forwards everything after the
executable to it.

    python examples/simple.py run -v cli -v --flag arg
"""
from optbind import CLI, Command, CollectedParameter, Flag, OptionGroup, Parameter
from optbind.utils import setup_logging
from optbind.validators import greater_than

setup_logging(log_filename=None)


def show(result) -> None:
    values = result.as_dict()
    for _ in range(values["times"]):
        print(values["executable"], values["args"])
    if values["verbose"]:
        print(values)


run = Command(
    "run",
    short_description="Run an executable",
    parameters=[Parameter("executable"), CollectedParameter("args")],
    execute=show,
)
run.add_flag("-v", "--verbose", help="Print more output")
run.add_key(
    "-t", "--times", type=int, default=1, validators=[greater_than(0)], help="Repeat count"
)
json_output = run.add_flag("--json", help="Print JSON")
yaml_output = run.add_flag("--yaml", help="Print YAML")
run.add_option_group(OptionGroup.at_most_one(json_output, yaml_output))

cli = CLI(
    "tester",
    version="1.0.0",
    description="Runs executables",
    commands=[run],
    global_options=[Flag("-y", "--yes", help="Assume yes")],
)

if __name__ == "__main__":
    cli.go_and_exit()
