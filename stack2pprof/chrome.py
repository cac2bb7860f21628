import re

CHROME_PROCESS_NAME = "chrome.exe"

_TYPE_RE = re.compile(r"--type=([\w-]+)")
_UTILITY_SUB_TYPE_RE = re.compile(r"--utility-sub-type=([\w.-]+)")


def chrome_process_type(command_line):
    """Returns the type of a chrome process, parsed from its command line.

    The browser process has no `--type` switch. Utility processes are named
    after the last component of their sub-type (e.g. `utility-NetworkService`)
    and renderers hosting extensions are reported as `extension`.
    """
    command_line = command_line or ""
    match = _TYPE_RE.search(command_line)
    if not match:
        return "browser"
    process_type = match.group(1)
    if process_type == "utility":
        sub_type = _UTILITY_SUB_TYPE_RE.search(command_line)
        if sub_type:
            process_type = f"utility-{sub_type.group(1).split('.')[-1]}"
    elif process_type == "renderer" and "--extension-process" in command_line:
        process_type = "extension"
    return process_type


def is_chrome_process(process_name):
    return process_name == CHROME_PROCESS_NAME


def split_process_name(process_name, command_line):
    """Returns the process name with the chrome process type appended."""
    return f"{process_name} ({chrome_process_type(command_line)})"
