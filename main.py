import click

from base_classes import ConfigError
from config_manager import ConfigManager
from utils.logging_utils import LoggingHandler


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('-c', '--conf', default=None, help='Path to a custom display configuration file')
@click.option('-q', '--quotes', default=None, help='Path to the quote file (overrides [DEFAULT].quotes_file)')
@click.option('-a', '--assets', default=None, help='Directory image paths are relative to (overrides [DEFAULT].assets_directory)')
@click.option('--wrap/--no-wrap', default=None, help='Cycle past the first/last quote instead of stopping there')
@click.option('-v', '--verbose', default=False, is_flag=True, help='Show effective settings before starting')
@click.pass_context
def cli(ctx, conf, quotes, assets, wrap, verbose):
    """
    Show quotes paired with images; Left/Right to move, q to quit
    """
    overrides = {
        'quotes_file': quotes,
        'assets_directory': assets,
        'wrap': wrap,
    }
    try:
        config_manager = ConfigManager(conf, overrides=overrides)
    except ConfigError as e:
        raise click.ClickException(str(e))

    logger = LoggingHandler(config_manager)
    try:
        settings = config_manager.load_settings()
        entries = config_manager.load_quotes()
    except ConfigError as e:
        logger.error('config', e)
        raise click.ClickException(str(e))

    summary = settings.summary()
    summary['quotes_file'] = config_manager.quotes_path()
    summary['entries'] = len(entries)
    summary['config_files'] = config_manager.loaded_files()
    logger.settings(summary)

    for kind, details in config_manager.warnings:
        logger.config_warning(kind, details)
        click.secho(
            f"Warning: {details.get('file')}: [{details.get('section')}].{details.get('key')}: "
            f"{kind.replace('_', ' ')} {details.get('value')!r}, using default",
            err=True,
            fg='yellow',
        )

    if verbose:
        for key, value in summary.items():
            click.echo(f'{key} = {value}')
        if logger.active():
            click.echo(f'log = {logger.path}')

    from tui.mode import TextualMode
    mode = TextualMode(entries, settings, logger=logger)
    ctx.exit(mode.start())


# take care of business
if __name__ == "__main__":
    cli()
