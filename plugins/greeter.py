"""Greets people joining a channel and answers ``!ping``."""


def setup(irc):
    def on_join(event, sender, channel=None, *args):
        if sender is None or channel is None:
            return
        if sender["nick"] == irc.me()["nick"]:
            return
        irc.privmsg(channel, b"Hello, " + sender["nick"] + b"!")

    def on_privmsg(event, sender, dst=None, text=b"", *args):
        if sender is None or dst is None:
            return
        if text.strip() == b"!ping":
            # Private messages are answered to the sender
            reply_to = dst if dst[:1] in (b"#", b"&") else sender["nick"]
            irc.privmsg(reply_to, b"pong")

    irc.add_handler("JOIN", on_join)
    irc.add_handler("PRIVMSG", on_privmsg)
