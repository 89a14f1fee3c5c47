"""pmdock - An X11 panel for hosting dockapps and app launchers"""

__version__ = "1.0.0"
