import os
import shutil
import tempfile


class SafeWriter:
    """
    A context manager that writes to a temporary file beside the
    destination and moves it into place only when the block finishes
    without an exception. Readers never see a half-written file.
    """

    def __init__(self, file_name, dest_dir, as_bytes=False, encoding="utf-8"):
        """

        :param str file_name:
        :param str dest_dir: created if it does not exist
        :param bool as_bytes:
        :param str encoding: ignored when `as_bytes` is True
        """
        assert file_name and dest_dir, "Names are required for both file name and destination directory"
        if os.path.exists(dest_dir):
            assert os.path.isdir(dest_dir), "Destination exists but is not a directory"
        else:
            os.makedirs(dest_dir)

        self.destfile = os.path.join(dest_dir, file_name)

        # same directory, so the final rename never crosses devices
        fd, self.tmpfile = tempfile.mkstemp(prefix="." + file_name + ".",
                                            suffix=".ska_tmp",
                                            dir=dest_dir)

        if os.path.exists(self.destfile):
            # keep permissions and times, as if only the contents changed
            shutil.copystat(self.destfile, self.tmpfile)

        if as_bytes:
            self.tmpfd = os.fdopen(fd, 'w+b')
        else:
            self.tmpfd = os.fdopen(fd, 'w', encoding=encoding)

    def __enter__(self):
        return self.tmpfd

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.tmpfd.close()
        if exc_type is None:
            os.replace(self.tmpfile, self.destfile)
        else:
            os.remove(self.tmpfile)
        return False
