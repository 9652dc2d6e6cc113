"""Run the installer-assets command line tool with `python -m installer_assets`."""

from installer_assets.tool.installer_assets import main

if __name__ == "__main__":
    main()
