"""Answers CTCP VERSION requests."""

VERSION = b"ircbot (https://www.python.org)"


def setup(irc):
    def on_ctcp(event, sender, command, dst, *args):
        if sender is not None and command.upper() == b"VERSION":
            irc.notice(sender["nick"], b"\x01VERSION " + VERSION + b"\x01")

    irc.add_handler(irc.CTCP, on_ctcp)
