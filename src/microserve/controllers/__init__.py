"""
Sample controllers. This package is the default deployment root: every
@rest_controller class defined in a module under it is discovered when the
server starts without an explicit target.
"""
