"""
Pod validation for qtpods.

A valid pod has an all-lowercase name and a directory of that name
holding LICENSE, README.md, <name>.pri and <name>.pro.
"""

from pathlib import Path
from typing import List, Union

REQUIRED_FILES = ("LICENSE", "README.md")


class PodValidator:
    """Checks pod directories against the pod layout contract."""

    def problems(self, repository: Union[str, Path], pod_name: str) -> List[str]:
        """
        List every way the pod fails the contract.

        Returns:
            Human-readable problems; empty for a valid pod
        """
        found = []
        if pod_name != pod_name.lower():
            found.append(f"name '{pod_name}' is not all lowercase")

        pod_dir = Path(repository) / pod_name
        if not pod_dir.is_dir():
            found.append(f"directory '{pod_name}' does not exist")
            return found

        for file_name in (*REQUIRED_FILES, f"{pod_name}.pri", f"{pod_name}.pro"):
            if not (pod_dir / file_name).exists():
                found.append(f"missing {file_name}")
        return found

    def check_pod(self, repository: Union[str, Path], pod_name: str) -> bool:
        return not self.problems(repository, pod_name)
