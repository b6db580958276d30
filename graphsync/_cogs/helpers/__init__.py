"""
General-purpose helpers not related to the reconciliation itself,
which are used to prepare and control the runtime environment.

As a rule of thumb, helpers MUST be abstracted from the project
to such an extent that they could be extracted as reusable libraries.
"""
