"""
L0 Data — Banner and prompt text.
"""

from __future__ import annotations

from wrfbuild.core.services.build.data.sources import FORUM_URL, TEST_CASES_URL, USER_GUIDE_URL

RULE = "=" * 56

WELCOME_TEMPLATE = """\
{rule}
            {app} Automated Installation
{rule}

This installer will download, configure and compile the Weather
Research and Forecasting ({app}) model version {version}.

What this installer will do:
1. Detect your system environment
2. Install required prerequisites
3. Download and extract {app} source code
4. Configure and compile {app}
5. Install {companion} (optional)
6. Verify the installation

Requirements:
- Administrator/sudo privileges (for installing dependencies)
- Internet connection
- At least 2GB of free disk space
- At least 4GB of RAM

The installation process may take 1-2 hours depending on your
hardware.

{rule}"""

SUCCESS_TEMPLATE = """\
{app} has been successfully installed!

Installation location: {install_root}
{app} version: {version}

Executables:
- {app}: {install_root}/{app}/main/wrf.exe
- Real: {install_root}/{app}/main/real.exe

Environment Setup:
Before using {app}, you need to set up the environment:
  source {descriptor}

Next Steps:
1. Read the {app} User's Guide: """ + USER_GUIDE_URL + """
2. Download test cases from: """ + TEST_CASES_URL + """
3. Join the {app} community: """ + FORUM_URL

PROMPT_CONTINUE = "Do you want to continue with the installation?"
PROMPT_INSTALL_DIR = "Installation directory"
PROMPT_OVERWRITE = "Directory exists and is not empty. Files may be overwritten. Continue?"
PROMPT_COMPANION = "Do you want to install {companion} ({app} Preprocessing System) as well?"
PROMPT_TROUBLESHOOT = "Please select an option"
