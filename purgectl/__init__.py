"""
purgectl - command-line front end for htcpurge.
"""
