"""CLI commands for minigit."""

from minigit.cli.commands.init import init_cmd
from minigit.cli.commands.hash_object import hash_object_cmd, write_tree_cmd
from minigit.cli.commands.ls_tree import ls_tree_cmd, cat_file_cmd
from minigit.cli.commands.add import add_cmd
from minigit.cli.commands.commit import commit_cmd
from minigit.cli.commands.log import log_cmd
from minigit.cli.commands.branch import branch_cmd
from minigit.cli.commands.refs import symbolic_ref_cmd
from minigit.cli.commands.status import status_cmd
from minigit.cli.commands.checkout import checkout_cmd
from minigit.cli.commands.merge import merge_cmd
from minigit.cli.commands.pack import pack_objects_cmd, unpack_objects_cmd

__all__ = ['init_cmd', 'hash_object_cmd', 'write_tree_cmd', 'ls_tree_cmd', 'cat_file_cmd',
           'add_cmd', 'commit_cmd', 'log_cmd', 'branch_cmd', 'symbolic_ref_cmd', 'status_cmd',
           'checkout_cmd', 'merge_cmd', 'pack_objects_cmd', 'unpack_objects_cmd']
