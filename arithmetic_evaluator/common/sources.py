"""Read batches of arithmetic expressions from text files and archives."""
from pathlib import Path
import tarfile
import tempfile
from typing import Iterable, List
import zipfile

import py7zr
from py7zr.exceptions import Bad7zFile
from pydantic import BaseModel, ConfigDict, Field, FilePath

from arithmetic_evaluator.common.logger import logger


class ExpressionSource(BaseModel):
    """
    A file holding one arithmetic expression per line.

    Supported formats:
    - plain .txt files
    - .zip, .tar.xz and .7z archives, from which the first .txt member is read
    """

    model_config = ConfigDict(frozen=True)

    path: FilePath = Field(..., description="Path to the text file or archive")

    def read_text(self) -> str:
        """
        Return the raw text of the source.

        :return: File content, or content of the first .txt file in the archive
        :rtype: str
        :raises ValueError: If the archive is corrupt, unsupported or contains no .txt file
        """
        if self.path.suffix == ".txt":
            return self.path.read_text(encoding="utf-8")
        return self._extract_archive(self.path)

    def expressions(self) -> List[str]:
        """
        Return the non-empty expression lines of the source, stripped.

        :return: List of expressions
        :rtype: List[str]
        """
        lines: List[str] = [line.strip() for line in self.read_text().splitlines() if line.strip()]
        logger.info(f"📄 Loaded {len(lines)} expressions from {self.path}")
        return lines

    @staticmethod
    def _first_txt_member(names: Iterable[str], archive_format: str) -> str:
        """
        Pick the first .txt entry among the member names of an archive.

        :param names: Member names, in archive order
        :param str archive_format: Format label used in the error message

        :return: Name of the first .txt member
        :rtype: str
        :raises ValueError: If the archive holds no .txt file
        """
        for name in names:
            if name.endswith(".txt"):
                return name
        raise ValueError(f"📄❌ No .txt file found in {archive_format} archive")

    @staticmethod
    def _extract_archive(archive_path: Path) -> str:
        """
        Extract the first .txt file found in a supported archive and return its content as a string.

        :param Path archive_path: Path to the archive file

        :return: Content of the extracted .txt file
        :rtype: str
        :raises ValueError: If the archive is corrupt, holds no .txt file or has an unsupported format
        """
        # Extract into a temporary directory, removed once the content is read
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir_path = Path(tmpdir)
            try:
                if archive_path.suffix == ".zip":
                    with zipfile.ZipFile(archive_path, "r") as zf:
                        member = ExpressionSource._first_txt_member(zf.namelist(), "zip")
                        zf.extract(member, path=tmpdir_path)

                elif archive_path.suffixes[-2:] == [".tar", ".xz"]:
                    with tarfile.open(archive_path, "r:xz") as tf:
                        files = (m.name for m in tf.getmembers() if m.isfile())
                        member = ExpressionSource._first_txt_member(files, "tar.xz")
                        tf.extract(member, path=tmpdir_path, filter="data")

                elif archive_path.suffix == ".7z":
                    with py7zr.SevenZipFile(archive_path, mode="r") as archive:
                        member = ExpressionSource._first_txt_member(archive.getnames(), "7z")
                        archive.extract(targets=[member], path=tmpdir_path)

                else:
                    raise ValueError(f"📄❌ Unsupported archive format: {archive_path.suffix}")

            except (zipfile.BadZipFile, tarfile.TarError, Bad7zFile) as exc:
                raise ValueError(f"📄❌ Unreadable archive {archive_path.name}: {exc}") from exc

            return (tmpdir_path / member).read_text(encoding="utf-8")


def load_expressions(path: Path) -> List[str]:
    """
    Load the expressions stored in a text file or archive.

    :param Path path: Path to the file

    :return: Non-empty expression lines
    :rtype: List[str]
    """
    return ExpressionSource(path=path).expressions()
