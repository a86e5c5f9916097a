import json
import logging
import sys

from pydantic_settings import CliApp, CliSettingsSource

from view_constellation.parameters import ConstellationParameters, ViewDataset
from view_constellation.planner import ConstellationPlanner


def main(args: list[str]) -> None:
    cli_settings = CliSettingsSource(ConstellationParameters, cli_kebab_case=True)
    params = CliApp.run(
        ConstellationParameters, cli_args=args, cli_settings_source=cli_settings
    )
    log_level = logging.DEBUG if params.verbose else logging.INFO
    logging.basicConfig(level=log_level)
    dataset = ViewDataset.from_json_file(params.dataset_file)
    plan = ConstellationPlanner.from_parameters(params, dataset).run()
    json.dump(plan.to_dict(grouped_pairs=params.grouped_pairs), sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main(sys.argv[1:])
