"""
Merge distributed analysis sets from a Dedalus run.

Usage:
    merge.py <base_path>... [--cleanup]

Options:
    --cleanup   Delete distributed files after merging

"""

if __name__ == "__main__":

    from docopt import docopt
    from dedalus.tools import logging
    from dedalus.tools import post

    args = docopt(__doc__)
    for base_path in args['<base_path>']:
        post.merge_process_files(base_path, cleanup=args['--cleanup'])
