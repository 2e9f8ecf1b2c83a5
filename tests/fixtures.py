"""
Sample diffs shared by the test modules
"""


SIMPLE_DIFF = "\n".join([
    "diff --git a/src/app.js b/src/app.js",
    "index 1234567..abcdefg 100644",
    "--- a/src/app.js",
    "+++ b/src/app.js",
    "@@ -1,4 +1,6 @@",
    " const express = require('express');",
    "+const cors = require('cors');",
    " const app = express();",
    "+app.use(cors());",
    " ",
    " app.listen(3000);",
])

PACKAGE_DIFF = "\n".join([
    "diff --git a/package.json b/package.json",
    "index 9876543..fedcba9 100644",
    "--- a/package.json",
    "+++ b/package.json",
    "@@ -5,5 +5,6 @@",
    '   "dependencies": {',
    '     "express": "^4.18.0",',
    '+    "cors": "^2.8.5",',
    '     "dotenv": "^8.2.0"',
    "   }",
    " }",
])

NEW_FILE_DIFF = "\n".join([
    "diff --git a/newfile.js b/newfile.js",
    "new file mode 100644",
    "index 0000000..1234567",
    "--- /dev/null",
    "+++ b/newfile.js",
    "@@ -0,0 +1,3 @@",
    "+const a = 1;",
    "+const b = 2;",
    "+module.exports = { a, b };",
])

DELETED_FILE_DIFF = "\n".join([
    "diff --git a/old.js b/old.js",
    "deleted file mode 100644",
    "index 1234567..0000000",
    "--- a/old.js",
    "+++ /dev/null",
    "@@ -1,2 +0,0 @@",
    "-const a = 1;",
    "-module.exports = a;",
])

RENAME_DIFF = "\n".join([
    "diff --git a/lib/old_name.py b/lib/new_name.py",
    "similarity index 90%",
    "rename from lib/old_name.py",
    "rename to lib/new_name.py",
    "index 1111111..2222222 100644",
    "--- a/lib/old_name.py",
    "+++ b/lib/new_name.py",
    "@@ -1,3 +1,3 @@",
    " def helper():",
    "-    return 1",
    "+    return 2",
    " # end",
])

BINARY_DIFF = "\n".join([
    "diff --git a/logo.png b/logo.png",
    "index 1234567..89abcde 100644",
    "Binary files a/logo.png and b/logo.png differ",
])

DIST_DIFF = "\n".join([
    "diff --git a/dist/bundle.js b/dist/bundle.js",
    "index 1111111..2222222 100644",
    "--- a/dist/bundle.js",
    "+++ b/dist/bundle.js",
    "@@ -1 +1 @@",
    "-var a=1;",
    "+var a=2;",
])

MALFORMED_DIFF = "\n".join([
    "diff --git a/x.py b/x.py",
    "--- a/x.py",
    "+++ b/x.py",
    "@@ -x +y @@",
    "+print('hi')",
])


def join_diffs(*diffs: str) -> str:
    """Concatenate single-file diffs into one diff text."""
    return "\n".join(diffs) + "\n"
