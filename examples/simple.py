import os
import argparse
from itertools import islice
from pathlib import Path

import numpy as np
import torch
import matplotlib.pyplot as plt
from loguru import logger

from KSP import LanczosIterator, get_orthogonalizer
from KSP.problems import gen_1d_laplacian, gen_x_randn
from KSP import config

STRATEGIES = ['cgs', 'mgs', 'cgs2', 'mgs2', 'cgsir', 'mgsir']


def orthogonality_loss(V):
    """max |V^H V - I| of the basis built so far."""
    G = V.gram()
    return torch.max(torch.abs(G - torch.eye(G.shape[0], dtype=G.dtype))).item()


def main():
    parser = argparse.ArgumentParser(description='Compare orthogonalization strategies in the Lanczos iteration')
    parser.add_argument('--n', type=int, default=400, help='Size of the 1-D Laplacian')
    parser.add_argument('--krylovdim', type=int, default=120, help='Number of Lanczos steps')
    parser.add_argument('--dump_root', type=str, default='./dump/', help='Directory for plots')
    args = parser.parse_args()

    args.dump_root = os.path.abspath(os.path.expanduser(args.dump_root))
    Path(args.dump_root).mkdir(parents=True, exist_ok=True)

    torch.manual_seed(config.SEED)
    A = gen_1d_laplacian(args.n)
    v0 = gen_x_randn(args.n)
    exact = np.linalg.eigvalsh(A.to_dense().numpy())

    plt.figure(figsize=(10, 6))
    for name in STRATEGIES:
        iterator = LanczosIterator(lambda x: torch.mv(A, x), v0, get_orthogonalizer(name))
        losses = []
        for V, T, r in islice(iterator, args.krylovdim):
            losses.append(orthogonality_loss(V))
        ritz = np.linalg.eigvalsh(T.to_dense().numpy())
        logger.info(f'{name:>6}: k={len(T)}, orthogonality loss {losses[-1]:.1e}, '
                    f'largest Ritz value error {abs(ritz[-1] - exact[-1]):.1e}')
        plt.semilogy(np.maximum(losses, 1e-17), label=name)

    plt.title(f'Loss of orthogonality (1-D Laplacian, n={args.n})')
    plt.xlabel('Krylov dimension')
    plt.ylabel('max |V^T V - I|')
    plt.legend()
    plt.grid(True, which='both', linestyle='--', alpha=0.3)
    out_file = os.path.join(args.dump_root, 'orthogonality.png')
    plt.savefig(out_file)
    logger.info(f'Saved plot: {out_file}')


if __name__ == '__main__':
    main()
