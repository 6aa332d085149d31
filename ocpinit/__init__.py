"""ocpinit - OpenShift downstream image patching for scaffolded operator projects."""

__version__ = "0.1.0"
