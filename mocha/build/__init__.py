"""
This module contains the install part of mocha (usable from the command line with `mocha install`).

It's separated into four parts with the following purposes:

- build_processor.py: facade that runs the stages for a package
- build_script.py: generate the build configuration of the native sub components
- builder.py: run the secondary and the primary build
- installer.py: copy and link the built artifacts into the binary directory
"""
