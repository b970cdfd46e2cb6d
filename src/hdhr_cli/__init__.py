"""
hdhr-cli reports on and manages recordings stored by an HDHomeRun DVR.

The device is found through its discover.json endpoint on the local
network. From there the recorded programs are grouped by series, and
every stored episode is sized with a HEAD request on its play URL, so
the report shows what each series really costs in disk space.
"""
