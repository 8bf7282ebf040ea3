"""
Package manifests, the directory layout below the installation root and the errors of an installation.
"""
