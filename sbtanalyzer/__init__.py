"""sbtanalyzer - dependency extraction for sbt builds.

Scans ``*.sbt`` files, ``project/*.scala`` sources and
``project/build.properties`` and reports the library, plugin, Scala and sbt
versions they declare, grouped by the file a version update would edit.
"""

__version__ = "0.1.0"
