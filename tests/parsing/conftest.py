# ---- Real captured command output ----

# df -h
DF_OUTPUT = (
    "Filesystem      Size  Used Avail Use% Mounted-on\n"
    "/dev/nvme0n1p2  468G  301G  144G  68% /\n"
    "tmpfs            16G  1.2M   16G   1% /run\n"
    "/dev/nvme0n1p1  511M   61M  451M  12% /boot/efi\n"
)

# ps aux (COMMAND column has spaces, so rows are ragged)
PS_OUTPUT = (
    "USER         PID %CPU %MEM    VSZ   RSS TTY      STAT START   TIME COMMAND\n"
    "root           1  0.0  0.0 167744 13056 ?        Ss   09:12   0:02 /sbin/init splash\n"
    "root           2  0.0  0.0      0     0 ?        S    09:12   0:00 [kthreadd]\n"
)

# docker inspect (trimmed)
DOCKER_INSPECT_JSON = """[
    {
        "Id": "4f1c2b7e9a",
        "State": {
            "Status": "running",
            "Running": true,
            "ExitCode": 0
        },
        "Name": "/web",
        "RestartCount": 2
    }
]
"""

# git log --stat (free text)
GIT_LOG_OUTPUT = (
    "commit 9fceb02d0ae598e95dc970b74767f19372d61af8\n"
    "Author: Dev <dev@example.com>\n"
    "Date:   Mon Oct 6 14:03:11 2025 +0200\n"
    "\n"
    "    Fix off-by-one in pager\n"
    "\n"
    " pager.c | 4 ++--\n"
    " 1 file changed, 2 insertions(+), 2 deletions(-)\n"
)
