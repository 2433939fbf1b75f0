"""CLI commands for mingit."""

from mingit.cli.commands.init import init_cmd
from mingit.cli.commands.hash_object import hash_object_cmd
from mingit.cli.commands.ls_tree import ls_tree_cmd, cat_file_cmd, count_objects_cmd
from mingit.cli.commands.write_tree import write_tree_cmd
from mingit.cli.commands.commit_tree import commit_tree_cmd
from mingit.cli.commands.checkout import checkout_cmd

__all__ = ['init_cmd', 'hash_object_cmd', 'ls_tree_cmd', 'cat_file_cmd',
           'count_objects_cmd', 'write_tree_cmd', 'commit_tree_cmd', 'checkout_cmd']
