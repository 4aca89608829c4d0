# Demo commands hand every argument, "-h" included, to the CmdApp harness untouched.
PASSTHROUGH_CONTEXT = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
    "help_option_names": [],
}
