import matplotlib
import numpy as np

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402


def pheromone_composite(pheromone_matrices, labels=None, cmap='coolwarm', save_path=None):
    """
    Single static heatmap: average pheromone intensity across all iterations.
    """
    if not pheromone_matrices:
        raise ValueError("No pheromone matrices provided.")
    avg_matrix = np.nanmean(np.array(pheromone_matrices), axis=0)
    fig, ax = plt.subplots(figsize=(6, 5))
    im = ax.imshow(avg_matrix, cmap=cmap, interpolation='nearest')
    ax.set_title("Cumulative Pheromone Intensity")
    fig.colorbar(im, ax=ax, label="Average Pheromone Strength")
    if labels is not None and len(labels) <= 40:
        ax.set_xticks(range(len(labels)))
        ax.set_xticklabels(labels, rotation=90, fontsize=6)
        ax.set_yticks(range(len(labels)))
        ax.set_yticklabels(labels, fontsize=6)
    else:
        ax.set_xticks([])
        ax.set_yticks([])
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return avg_matrix


def pheromone_mean_plot(pheromone_matrices, best_lengths=None, save_path=None):
    """
    Mean pheromone value per iteration, with the best tour length on a twin axis.
    """
    mean_values = [np.nanmean(m) for m in pheromone_matrices]
    fig, ax = plt.subplots(figsize=(6, 3))
    ax.plot(mean_values, color='red', label="Mean pheromone")
    ax.set_title("Average Pheromone Intensity Over Time")
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Mean Pheromone Value")
    ax.grid(True, alpha=0.3)
    if best_lengths is not None:
        ax2 = ax.twinx()
        ax2.plot(best_lengths, color='blue', label="Best length")
        ax2.set_ylabel("Best tour length")
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return mean_values
