import click

from rosmanifest.cli.ensure import Ensure
from rosmanifest.cli.output import user_output
from rosmanifest.core.context import ResolverContext
from rosmanifest.core.project_config import (
    CONFIG_FILENAME,
    ProjectConfig,
    RosSettings,
    save_project_config,
)


@click.command("init")
@click.option("--name", help="Project name. Defaults to the directory name.")
@click.option("--version", "version", default="0.1.0", show_default=True)
@click.option("--summary", default="", help="One-sentence project summary.")
@click.option("--author", "authors", multiple=True, help="Author; the first one maintains.")
@click.option("--contact", default="", help="Maintainer e-mail address.")
@click.option("--license", "license_", default="BSD", show_default=True)
@click.option("--home", default="", help="Project home page.")
@click.option(
    "--distribution",
    help="ROS distribution to generate for. Defaults to ROS_DISTRO at run time.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@click.pass_obj
def init_cmd(
    ctx: ResolverContext,
    name: str | None,
    version: str,
    summary: str,
    authors: tuple[str, ...],
    contact: str,
    license_: str,
    home: str,
    distribution: str | None,
    force: bool,
) -> None:
    """Write rosmanifest.toml to the current directory."""
    config_path = ctx.cwd / CONFIG_FILENAME
    Ensure.invariant(
        force or not config_path.exists(),
        f"{config_path} already exists. Use --force to overwrite.",
    )

    config = ProjectConfig(
        name=name or ctx.cwd.name,
        version=version,
        summary=summary,
        authors=authors,
        contact=contact,
        license=license_,
        home=home,
        ros=RosSettings(distribution=distribution),
    )
    save_project_config(config_path, config)
    user_output(f"Created {config_path}")
