"""
EnderScript Project Configuration

Reads and writes esconfig.json, the per-project settings file.
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Union

from ..compiler.codegen import DEFAULT_NAMESPACE

CONFIG_FILE = "esconfig.json"
SOURCE_EXTENSION = ".es"


@dataclass
class ProjectConfig:
    """Settings of one EnderScript project; paths are relative to its root."""
    
    name: str
    namespace: str = DEFAULT_NAMESPACE
    source: str = "./src"
    output: str = "./out"
    
    @classmethod
    def load(cls, root: Union[str, Path] = ".") -> 'ProjectConfig':
        """
        Load esconfig.json from a project root.
        
        Raises:
            FileNotFoundError: If the root has no config file
            ValueError: If the file is not a JSON object with a name
        """
        path = Path(root) / CONFIG_FILE
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        
        if not isinstance(data, dict) or "name" not in data:
            raise ValueError(f"{path}: expected an object with a 'name' field")
        
        known = {key: data[key] for key in ("name", "namespace", "source", "output") if key in data}
        return cls(**known)
    
    def save(self, root: Union[str, Path] = ".") -> Path:
        """Write esconfig.json into the project root and return its path."""
        path = Path(root) / CONFIG_FILE
        path.write_text(json.dumps(asdict(self), indent=2) + "\n", encoding='utf-8')
        return path
    
    def source_dir(self, root: Union[str, Path] = ".") -> Path:
        return Path(root) / self.source
    
    def output_dir(self, root: Union[str, Path] = ".") -> Path:
        return Path(root) / self.output
    
    def scaffold(self, root: Union[str, Path] = ".") -> None:
        """Create the source folder with its namespace sub-folder, and the output folder."""
        (self.source_dir(root) / self.namespace).mkdir(parents=True, exist_ok=True)
        self.output_dir(root).mkdir(parents=True, exist_ok=True)
    
    def sources(self, root: Union[str, Path] = ".") -> List[Path]:
        """Every .es file under the source folder, sorted."""
        return sorted(self.source_dir(root).rglob("*" + SOURCE_EXTENSION))
